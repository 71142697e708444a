"""Secret protection package."""

from .secret_box import (
    SecretBox,
    DpapiSecretBox,
    FernetSecretBox,
    default_secret_box,
)

__all__ = [
    "SecretBox",
    "DpapiSecretBox",
    "FernetSecretBox",
    "default_secret_box",
]
