"""Embedded runtime configuration models."""

from pydantic import BaseModel, Field


class RuntimeConfig(BaseModel):
    """Configuration for the embedded custom fact runtime."""

    enabled: bool = Field(default=True, description="Start the embedded runtime")
    library: str = Field(
        default="hostfacts.runtime.module",
        description="Dotted name of the runtime core library loaded at initialize",
    )
    include_stack_trace: bool = Field(
        default=False,
        description="Attach stack traces to errors raised by custom fact code",
    )
    redirect_stdout: bool = Field(
        default=True,
        description="Send custom fact stdout to stderr during resolution",
    )
    initialize_framework: bool = Field(
        default=False,
        description="Load the external configuration framework before custom facts",
    )
    framework_module: str = Field(
        default="puppet",
        min_length=1,
        description="Module name of the external configuration framework",
    )
    custom_fact_dirs: list[str] = Field(
        default_factory=list,
        description="Directories searched, in order, for custom fact files",
    )
    external_fact_dirs: list[str] = Field(
        default_factory=list,
        description="Directories searched for external (data) fact files",
    )
