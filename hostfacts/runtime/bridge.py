"""Lifecycle entry points for the embedded runtime.

`RuntimeBridge` starts the runtime, loads custom facts into a
FactCollection, and tears the runtime down. Failures never escape these
entry points: each one logs and reports a boolean outcome, and the rest of
the fact set stays usable.
"""

import importlib
import sys
from collections.abc import Iterator, Sequence
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING

from hostfacts.exceptions import HostFactsError, RuntimeEvalError
from hostfacts.observability.logging import get_logger
from hostfacts.runtime.api import RuntimeApi
from hostfacts.runtime.module import FactModule

if TYPE_CHECKING:
    from hostfacts.facts.collection import FactCollection

logger = get_logger(__name__)

# Executed as one unit; any failure inside it is reported once
FRAMEWORK_BOOTSTRAP = """\
import importlib
import sys

framework = importlib.import_module(framework_module)
framework.initialize_settings()
if framework.settings["libdir"] not in sys.path:
    sys.path.append(framework.settings["libdir"])
facter.reset()
facter.search_external([framework.settings["pluginfactdest"]])
if hasattr(framework, "initialize_facts"):
    framework.initialize_facts(facter)
else:
    facter.add(framework_module + "version", setcode=lambda: str(framework.version))
"""


@contextmanager
def redirected_stdout(runtime: RuntimeApi) -> Iterator[None]:
    """Point the runtime's `$stdout` at its `$stderr` while the block runs.

    Custom fact code printing to stdout would otherwise corrupt the
    structured output written there by the host.
    """
    logger.debug("redirecting_runtime_stdout")
    previous = runtime.gv_get("$stdout")
    runtime.gv_set("$stdout", runtime.gv_get("$stderr"))
    try:
        yield
    finally:
        logger.debug("restoring_runtime_stdout")
        runtime.gv_set("$stdout", previous)


@contextmanager
def windows_console() -> Iterator[None]:
    """Prepare a Windows process for running custom facts.

    Winsock must be started before user code opens sockets, and stdout is
    written through unbuffered while custom facts run so output of commands
    they spawn is not interleaved with ours. Elsewhere this does nothing.
    """
    if sys.platform != "win32":
        yield
        return

    # Importing the socket extension runs WSAStartup
    importlib.import_module("socket")

    stream = sys.stdout
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is None:
        yield
        return

    line_buffering = stream.line_buffering
    write_through = stream.write_through
    stream.flush()
    reconfigure(line_buffering=False, write_through=True)
    try:
        yield
    finally:
        stream.flush()
        reconfigure(line_buffering=line_buffering, write_through=write_through)


class RuntimeBridge:
    """Owns one RuntimeApi for the lifetime of the process.

    Call `initialize` once at startup and `uninitialize` once at shutdown;
    `load_custom_facts` may run any number of times in between.
    """

    def __init__(self, runtime: RuntimeApi, framework_module: str = "puppet") -> None:
        self._runtime = runtime
        self._framework_module = framework_module

    @property
    def runtime(self) -> RuntimeApi:
        return self._runtime

    @property
    def available(self) -> bool:
        """Whether runtime-backed facts can be loaded."""
        return self._runtime.initialized

    def initialize(self, include_stack_trace: bool = False) -> bool:
        """Start the runtime.

        Returns:
            False if the runtime could not be started
        """
        try:
            self._runtime.initialize()
        except HostFactsError as exc:
            logger.warning(
                "runtime_unavailable",
                error=str(exc),
                detail="facts requiring the runtime will not be resolved",
            )
            return False
        self._runtime.include_stack_trace(include_stack_trace)
        return True

    def load_custom_facts(
        self,
        facts: "FactCollection",
        initialize_framework: bool = False,
        redirect_stdout: bool = False,
        paths: Sequence[str] = (),
        external_paths: Sequence[str] = (),
    ) -> bool:
        """Load custom facts from `paths` and resolve them into `facts`.

        Args:
            facts: Collection receiving the resolved facts
            initialize_framework: Run the configuration framework bootstrap first
            redirect_stdout: Send runtime stdout to stderr during resolution
            paths: Directories searched, in order, for fact-definition files
            external_paths: Directories searched for external data facts

        Returns:
            False if the runtime is not running or loading failed
        """
        if not self._runtime.initialized:
            logger.debug("runtime_not_initialized", detail="skipping custom facts")
            return False

        module = FactModule(
            facts,
            self._runtime,
            external_paths=external_paths,
            load_external=not initialize_framework,
        )
        try:
            with windows_console():
                if initialize_framework:
                    self._bootstrap_framework(module)
                module.load(paths)
                with ExitStack() as stack:
                    if redirect_stdout:
                        stack.enter_context(redirected_stdout(self._runtime))
                    module.resolve_facts()
        except HostFactsError as exc:
            logger.warning("custom_facts_failed", error=str(exc))
            return False

        logger.debug("custom_facts_loaded", count=len(module.custom_facts))
        return True

    def uninitialize(self) -> bool:
        """Tear the runtime down. Only valid once, after `initialize`."""
        try:
            self._runtime.uninitialize()
        except HostFactsError as exc:
            logger.warning("runtime_uninitialize_failed", error=str(exc))
            return False
        return True

    def _bootstrap_framework(self, module: FactModule) -> None:
        try:
            self._runtime.eval(
                FRAMEWORK_BOOTSTRAP,
                {"facter": module, "framework_module": self._framework_module},
                filename="<framework-bootstrap>",
            )
        except RuntimeEvalError as exc:
            logger.warning(
                "framework_load_failed",
                framework=self._framework_module,
                error=str(exc),
                detail="some facts may be unavailable",
            )
