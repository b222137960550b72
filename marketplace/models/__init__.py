
# Re-export all models for convenient imports
from marketplace.models.listing import Listing, ListingCreate, ListingImage, ListingOwner
from marketplace.models.navigation import NavAction, NavBar, UserMenu, View
from marketplace.models.profile import Profile, ProfileUpdate
from marketplace.models.result import Err, ErrorKind, Ok, Result, to_envelope
from marketplace.models.user import (
    ResetPasswordRequest,
    SessionUser,
    SignInRequest,
    SignUpRequest,
)

__all__ = [
    # Listing models
    "Listing",
    "ListingCreate",
    "ListingImage",
    "ListingOwner",
    # Navigation models
    "NavAction",
    "NavBar",
    "UserMenu",
    "View",
    # Profile models
    "Profile",
    "ProfileUpdate",
    # Results
    "Err",
    "ErrorKind",
    "Ok",
    "Result",
    "to_envelope",
    # User models
    "ResetPasswordRequest",
    "SessionUser",
    "SignInRequest",
    "SignUpRequest",
]
