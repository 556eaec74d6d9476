"""Abstract tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolContext:
    """Context passed to tool execution."""

    workspace_id: str | None = None
    # Provider used when the tool input does not name one
    provider: str | None = None
    session_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def resolve_provider(self, input_data: dict[str, Any]) -> str | None:
        """Provider from tool input, falling back to the context."""
        value = input_data.get("provider") or self.provider
        return str(value) if value else None

    def resolve_workspace(self, input_data: dict[str, Any]) -> str | None:
        """Workspace id from tool input, falling back to the context."""
        value = input_data.get("workspaceId") or self.workspace_id
        return str(value) if value else None


@dataclass
class ToolResult:
    """Result from tool execution."""

    content: str
    is_error: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, content: str, **metadata: Any) -> "ToolResult":
        """Create a successful result."""
        return cls(content=content, is_error=False, metadata=metadata)

    @classmethod
    def error(cls, message: str, **metadata: Any) -> "ToolResult":
        """Create an error result."""
        return cls(content=message, is_error=True, metadata=metadata)


class Tool(ABC):
    """Abstract base class for tools.

    Tools are what an agent calls to act on a connected service:
    discovering its capabilities, routing an action, or sending a raw
    request through the broker.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this tool."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description for the LLM."""
        ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for tool input parameters."""
        ...

    @abstractmethod
    async def execute(
        self,
        input_data: dict[str, Any],
        context: ToolContext,
    ) -> ToolResult:
        """Execute the tool with the given input.

        Args:
            input_data: Tool input matching the input_schema.
            context: Execution context.

        Returns:
            Tool execution result.
        """
        ...

    def to_definition(self) -> dict[str, Any]:
        """Convert to LLM tool definition format.

        Returns:
            Dict suitable for LLM tool definitions.
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }
