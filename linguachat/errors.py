"""Exception hierarchy for the conversation pipeline.

Everything the pipeline raises derives from :class:`PipelineError`, which is
what ``ConversationPipeline.process_query`` converts into the error envelope.
Request validation is not part of this hierarchy: malformed messages are
rejected by the pydantic request schema before the pipeline is reached.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class UninitializedError(PipelineError):
    """The embedding index was queried before it finished building."""


class ProcessingError(PipelineError):
    """A collaborator call failed while answering a message."""


class RetrievalError(ProcessingError):
    """Embedding or similarity search failed."""


class ModelInvocationError(ProcessingError):
    """The language model call failed."""

    def __init__(self, message: str, operation: str | None = None):
        self.operation = operation
        super().__init__(message)


class ToolCallShapeError(PipelineError):
    """A model tool call matched none of the recognised call shapes."""

    def __init__(self, message: str, raw_call: object = None):
        self.raw_call = raw_call
        super().__init__(message)


class UnknownToolError(PipelineError):
    """The model asked for a tool that is not in the registry."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")
