"""Generation options and protoc parameter parsing.

protoc passes plugin options as a single comma separated string:

    protoc --openapi3_out=. --openapi3_opt=application=docs,version=1.2.0 docs.proto
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from twirp_openapi.errors import InvalidParameter, MissingApplicationName


class GenerationOptions(BaseModel):
    """Options for one generation run."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    application: str = ""
    version: str = "0.0.0"
    infomaker: bool = False  # allow the infomaker.io server domain
    json_file: str | None = Field(default=None, alias="json")
    spec_file: str | None = Field(default=None, alias="file")
    format: Literal["json", "yaml"] = "json"
    prefix: str = "twirp"

    @model_validator(mode="after")
    def _check_outputs(self) -> "GenerationOptions":
        if self.json_file and self.json_file == self.output_file:
            raise InvalidParameter(
                f"json dump and API document both write to {self.json_file!r}", subject=self.json_file,
            )
        return self

    @classmethod
    def from_parameter(cls, parameter: str) -> "GenerationOptions":
        """Parse ``key=value,key2=value2``. A bare key means true."""
        values: dict[str, str] = {}
        for item in parameter.split(","):
            item = item.strip()
            if not item:
                continue
            key, sep, value = item.partition("=")
            values[key.strip()] = value.strip() if sep else "true"

        try:
            return cls.model_validate(values)
        except ValidationError as err:
            raise InvalidParameter(f"invalid plugin parameter {parameter!r}: {err}") from err

    def require_application(self) -> None:
        if not self.application:
            raise MissingApplicationName("missing application name")

    @property
    def output_file(self) -> str:
        """The API document file name, defaulting to <application>-openapi.<format>."""
        return self.spec_file or f"{self.application}-openapi.{self.format}"
