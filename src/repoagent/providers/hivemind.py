"""HiveMind agent provider placeholder.

Selecting it is valid configuration; every generation call fails fast with
ProviderNotImplementedError until the HiveMind network client exists.
"""

from __future__ import annotations

from repoagent.errors import ProviderNotImplementedError
from repoagent.providers.types import AgentProvider, GenerateRequest, GenerateResult


class HiveMindAgentProvider(AgentProvider):
    name = "hivemind"

    def generate_response(self, request: GenerateRequest) -> GenerateResult:
        raise ProviderNotImplementedError(
            "HiveMind", hint="Use the 'stub' or 'litellm' provider for now."
        )
