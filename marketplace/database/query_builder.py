from datetime import date, datetime

TABLES = ["listings", "listing_images", "profiles"]

OWNER_COLUMNS = ["username", "full_name", "avatar_url"]
IMAGE_COLUMNS = ["id", "url", "created_at"]


class QueryBuilder:
    @staticmethod
    def build_select(table_name: str, embeds: dict[str, list[str]] | None = None) -> str:
        """
        Build a PostgREST select string with embedded (joined) resources.
        Does NOT execute - returns the column string for .select().

        Args:
            table_name: Table being selected from
            embeds: Mapping of related table name to the columns to embed

        Returns:
            Select string

        Example:
            QueryBuilder.build_select("listings", {"listing_images": ["id", "url"]})
            -> "*, listing_images(id, url)"
        """
        if table_name not in TABLES:
            raise ValueError(f"Invalid table: {table_name}")

        parts = ["*"]
        for related, columns in (embeds or {}).items():
            if related not in TABLES:
                raise ValueError(f"Invalid table: {related}")
            parts.append(f"{related}({', '.join(columns)})")
        return ", ".join(parts)

    @staticmethod
    def build_row(data: dict, table_name: str) -> dict:
        """
        Build a row payload for insert/upsert/update from a dict.

        Dates and datetimes are serialised to ISO-8601 strings so the payload
        can go straight into the JSON request body.
        """
        if table_name not in TABLES:
            raise ValueError(f"Invalid table: {table_name}")

        row = {}
        for key, value in data.items():
            if isinstance(value, (datetime, date)):
                row[key] = value.isoformat()
            else:
                row[key] = value
        return row


LISTING_WITH_OWNER_AND_IMAGES = QueryBuilder.build_select(
    "listings", {"profiles": OWNER_COLUMNS, "listing_images": IMAGE_COLUMNS}
)
LISTING_WITH_IMAGES = QueryBuilder.build_select("listings", {"listing_images": IMAGE_COLUMNS})
