from marketplace.models.profile import ProfileUpdate
from marketplace.models.result import Err, ErrorKind, Ok
from test.factories import ProfileUpdateFactory, make_upload
from test.fakes import PUBLIC_URL_BASE, api_error, storage_error


async def test_create_profile_fills_defaults(profile_service, fake_client):
    user = fake_client.sign_in_as("new@example.com")

    result = await profile_service.create_or_update_profile(ProfileUpdate(username="newbie"))

    assert isinstance(result, Ok)
    profile = result.value
    assert profile.id == user.id
    assert profile.username == "newbie"
    assert profile.bio == ""
    assert profile.location == ""
    assert profile.avatar_url is None
    assert profile.updated_at is not None


async def test_update_replaces_existing_profile(profile_service, fake_client, seller):
    update = ProfileUpdateFactory.build(username="renamed", bio="Selling old stuff")

    result = await profile_service.create_or_update_profile(update)

    assert result.value.username == "renamed"
    assert result.value.bio == "Selling old stuff"
    rows = fake_client.db.rows("profiles")
    assert len(rows) == 1
    assert rows[0]["id"] == seller.id


async def test_update_profile_requires_user(profile_service, fake_client):
    result = await profile_service.create_or_update_profile(ProfileUpdate(username="ghost"))

    assert result.kind == ErrorKind.AUTH_REQUIRED
    assert fake_client.db.rows("profiles") == []


async def test_update_profile_upstream_failure(profile_service, fake_client, seller):
    fake_client.db.fail("profiles", "upsert", api_error("row level security"))

    result = await profile_service.create_or_update_profile(ProfileUpdate(username="x"))

    assert result == Err(ErrorKind.UPSTREAM_FAILURE, "row level security")


async def test_get_profile(profile_service, seller):
    result = await profile_service.get_profile(seller.id)

    assert result.value.username == "seller"
    assert result.value.full_name == "Sam Seller"


async def test_get_missing_profile(profile_service):
    result = await profile_service.get_profile("nobody")

    assert result == Err(ErrorKind.NOT_FOUND, "Profile not found")


async def test_current_user_profile_without_session(profile_service):
    result = await profile_service.get_current_user_profile()

    assert result == Err(ErrorKind.AUTH_REQUIRED, "User not authenticated")


async def test_upload_avatar_returns_public_url(profile_service, fake_client, seller):
    result = await profile_service.upload_avatar(make_upload("me.PNG"))

    assert isinstance(result, Ok)
    [key] = fake_client.storage.keys()
    assert key.startswith(f"avatars/{seller.id}-")
    assert key.endswith(".PNG")
    assert result.value == f"{PUBLIC_URL_BASE}/listings-images/{key}"
    # the profile row is not touched
    assert fake_client.db.rows("profiles")[0]["avatar_url"] is None


async def test_upload_avatar_storage_failure(profile_service, fake_client, seller):
    fake_client.storage.fail_upload(1, storage_error("payload too large"))

    result = await profile_service.upload_avatar(make_upload("me.jpg"))

    assert result == Err(ErrorKind.UPSTREAM_FAILURE, "payload too large")
