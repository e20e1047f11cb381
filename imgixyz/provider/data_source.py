"""The ``<provider>_source`` data source: read-only lookup of a source by id."""

from typing import Any

from imgixyz.client.errors import ImgixClientError
from imgixyz.client.sources import ImgixClient
from imgixyz.provider.base import Diagnostics, ResourceResponse
from imgixyz.provider.models import SourceModel, from_remote
from imgixyz.provider.resource import configure_client, unconfigured


class SourceDataSource:
    """Exposes an existing source's attributes without managing it."""

    def __init__(self, client: ImgixClient | None = None) -> None:
        self.client = client

    @staticmethod
    def type_name(provider_type_name: str) -> str:
        return f"{provider_type_name}_source"

    def configure(self, provider_data: Any) -> Diagnostics:
        diagnostics = Diagnostics()
        client = configure_client(provider_data, "Data Source", diagnostics)
        if client is not None:
            self.client = client
        return diagnostics

    async def read(self, config: SourceModel) -> ResourceResponse:
        """Fetch the source named by ``config.id``.

        A secret given in the configuration is echoed into the result,
        since imgix never returns it.
        """
        response = ResourceResponse()
        if self.client is None:
            unconfigured(response.diagnostics)
            return response

        try:
            source = await self.client.get_source_by_id(config.id or "")
        except ImgixClientError as e:
            response.diagnostics.add_error("Failed to fetch source by ID", str(e))
            return response

        response.state = from_remote(source, config)
        return response
