from typing import Any
from typing import Dict

from pydantic import BaseModel
from pydantic import Field

APPLICATION_JSON = "application/json"


class ProviderConfig(BaseModel):
    """
    Process-wide configuration for the JSON provider.

    `properties` holds application-level settings; only the entries whose
    names are recognized marshaller/unmarshaller options end up in the
    provider's defaults.
    """

    properties: Dict[str, Any] = Field(default_factory=dict)
    json_logging: bool = False
    log_level: str = "DEBUG"

    def get_property(self, name: str) -> Any:
        return self.properties.get(name)
