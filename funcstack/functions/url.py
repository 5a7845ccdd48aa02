"""Function URL settings."""

from typing import Any, Optional, Union

from funcstack.functions.normalize import to_seconds
from funcstack.functions.schemas import FunctionUrlCorsProps, FunctionUrlProps

AUTH_NONE = "NONE"
AUTH_IAM = "AWS_IAM"


def build_cors_config(cors: Union[bool, FunctionUrlCorsProps, None]) -> Optional[dict[str, Any]]:
    """Template CORS block. None/True means permissive defaults, False disables."""
    if cors is False:
        return None
    if cors is None or cors is True:
        return {"AllowHeaders": ["*"], "AllowMethods": ["*"], "AllowOrigins": ["*"]}

    config: dict[str, Any] = {
        "AllowCredentials": cors.allow_credentials,
        "AllowHeaders": cors.allow_headers or ["*"],
        "AllowMethods": cors.allow_methods or ["*"],
        "AllowOrigins": cors.allow_origins or ["*"],
        "ExposeHeaders": cors.expose_headers,
        "MaxAge": to_seconds(cors.max_age) if cors.max_age is not None else None,
    }
    return {k: v for k, v in config.items() if v is not None}


def resolve_url_settings(
    url: Union[bool, FunctionUrlProps, None],
) -> Optional[tuple[str, Optional[dict[str, Any]]]]:
    """(auth type, cors block) for a url prop, or None when no URL is wanted."""
    if url is None or url is False:
        return None
    if url is True:
        return AUTH_NONE, build_cors_config(True)
    auth_type = AUTH_IAM if url.authorizer == "iam" else AUTH_NONE
    return auth_type, build_cors_config(url.cors)
