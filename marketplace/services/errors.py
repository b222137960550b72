from supabase import AuthError, PostgrestAPIError, StorageException

# Errors reported by the hosted platform itself, as opposed to bugs or network faults
UPSTREAM_ERRORS = (AuthError, PostgrestAPIError, StorageException)


def upstream_message(error: Exception) -> str:
    """Human readable message from an auth, table or storage error"""
    message = getattr(error, "message", None)
    if message:
        return str(message)
    # StorageException carries the response body dict as its first argument
    if error.args and isinstance(error.args[0], dict):
        body = error.args[0]
        return str(body.get("message") or body.get("error") or body)
    return str(error)
