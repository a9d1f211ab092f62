"""
Data models for gateway requests and replies.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from ..shared.constants import OperationKind, RespondType


@dataclass
class PreparedRequest:
    """
    A request ready to be posted (or rendered as a form).

    `params` is the merged parameter set before authentication;
    `fields` is exactly what goes on the wire.
    """
    kind: OperationKind
    url: str
    params: Dict[str, Any]
    fields: Dict[str, Any]

    @property
    def respond_type(self) -> Optional[RespondType]:
        value = self.params.get("RespondType")
        try:
            return RespondType(value) if value is not None else None
        except ValueError:
            return None


@dataclass
class GatewayResponse:
    """Raw reply returned by a transport."""
    status_code: int
    body: Union[bytes, str]
    url: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
