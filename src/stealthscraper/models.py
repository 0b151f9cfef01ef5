"""Launch configuration and proxy credential models.

Both models accept the camelCase keys used by JSON callers
(``ignoreDefaultArgs``, ``executablePath``) as well as snake_case names.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_snake

from stealthscraper.exceptions import ConfigurationError

PROXY_SERVER_FLAG = "--proxy-server="


class LaunchOptions(BaseModel):
    """Options handed to the driver's browser launch call.

    Fields the model does not know about are kept and forwarded, so any
    extra launch keyword (``slow_mo``, ``timeout``...) can be merged in.
    Extra camelCase keys (``slowMo``) come out of ``to_launch_kwargs`` in
    snake_case (``slow_mo``).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    headless: bool = True
    ignore_default_args: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("ignore_default_args", "ignoreDefaultArgs"),
    )
    executable_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("executable_path", "executablePath"),
    )
    args: list[str] | None = None

    def to_launch_kwargs(self) -> dict[str, Any]:
        """Return snake_case keyword arguments for ``chromium.launch()``."""
        kwargs = self.model_dump(exclude_none=True, exclude=set(self.model_extra or ()))
        for key, value in (self.model_extra or {}).items():
            if value is not None:
                kwargs[to_snake(key)] = value
        return kwargs

    def with_proxy_server(self, url: str) -> "LaunchOptions":
        """Return a copy whose ``args`` carries exactly one ``--proxy-server`` flag."""
        args = [a for a in (self.args or []) if not a.startswith(PROXY_SERVER_FLAG)]
        args.append(f"{PROXY_SERVER_FLAG}{url}")
        return self.model_copy(update={"args": args}, deep=True)


class ProxyCredentials(BaseModel):
    """An authenticated proxy: server URL plus basic-auth credentials."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @classmethod
    def parse(cls, obj: "ProxyCredentials | Mapping[str, Any]") -> "ProxyCredentials":
        """Validate *obj* into ``ProxyCredentials``.

        Raises:
            ConfigurationError: If any of url, username or password is missing or empty.
        """
        if isinstance(obj, cls):
            return obj
        if not isinstance(obj, Mapping):
            raise ConfigurationError(
                f"Wrong proxy object of type {type(obj).__name__}. "
                "It must contain properties url, username and password!"
            )
        try:
            return cls.model_validate(dict(obj))
        except ValidationError as exc:
            missing = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            raise ConfigurationError(
                "Wrong proxy object. It must contain properties url, username and password! "
                f"Invalid: {', '.join(missing)}"
            ) from exc
