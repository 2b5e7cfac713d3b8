from typing import Annotated, Any, ClassVar

from pydantic import BeforeValidator, Field

from notifyhub.errors import InvalidConfig
from notifyhub.notification.endpoint import (
    NotificationEndpoint,
    NullableStr,
    SecretField,
    SecretSpec,
    validate_url,
)

HTTP_METHODS = ("POST", "GET", "PUT")

AUTH_NONE = "none"
AUTH_BASIC = "basic"
AUTH_BEARER = "bearer"
AUTH_METHODS = (AUTH_NONE, AUTH_BASIC, AUTH_BEARER)


def _none_as_dict(value: Any) -> Any:
    return {} if value is None else value


class HTTPEndpoint(NotificationEndpoint):
    """Generic HTTP callback endpoint.

    Depending on ``auth_method`` the request is sent unauthenticated, with
    basic auth (``username``/``password``) or with a bearer ``token``.
    """

    endpoint_type: ClassVar[str] = "http"
    secret_specs: ClassVar[tuple[SecretSpec, ...]] = (
        SecretSpec("token", "token", "-token"),
        SecretSpec("username", "username", "-username"),
        SecretSpec("password", "password", "-password"),
    )

    url: NullableStr = ""
    auth_method: NullableStr = Field(default="", alias="authMethod")
    method: NullableStr = ""
    content_template: NullableStr = Field(default="", alias="contentTemplate")
    headers: Annotated[dict[str, str], BeforeValidator(_none_as_dict)] = Field(
        default_factory=dict
    )
    token: SecretField = Field(default_factory=SecretField)
    username: SecretField = Field(default_factory=SecretField)
    password: SecretField = Field(default_factory=SecretField)

    def _validate_variant(self) -> None:
        if not self.url:
            raise InvalidConfig("http endpoint URL must be provided")
        validate_url(self.url, self.endpoint_type)

        if self.method not in HTTP_METHODS:
            raise InvalidConfig(
                f"Invalid http method '{self.method}', expected one of: "
                + ", ".join(HTTP_METHODS)
            )
        if self.auth_method not in AUTH_METHODS:
            raise InvalidConfig(
                f"Invalid http auth method '{self.auth_method}', expected one of: "
                + ", ".join(AUTH_METHODS)
            )
        if self.auth_method == AUTH_BASIC and not (
            self.username.is_set() and self.password.is_set()
        ):
            raise InvalidConfig("http basic auth requires username and password")
        if self.auth_method == AUTH_BEARER and not self.token.is_set():
            raise InvalidConfig("http bearer auth requires token")
