"""Base class for all interface steps.

Every step declares typed Input, Output, Config via Pydantic models, so a
step can be run on its own (from the CLI, a test, or the robot interface)
and its contracts can be inspected as JSON Schema.
"""

from __future__ import annotations

import time
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, ClassVar

from pydantic import BaseModel

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """Abstract base for interface steps.

    Subclasses must:
    1. Define concrete Pydantic models for InputT, OutputT, ConfigT
    2. Set class variables: input_type, output_type, config_type
    3. Implement run() and validate_inputs()

    Example:
        class HullVisualizationStep(BaseStep[HullInput, VisualizationOutput, HullConfig]):
            input_type = HullInput
            output_type = VisualizationOutput
            config_type = HullConfig

            def run(self, inputs: HullInput) -> VisualizationOutput: ...
            def validate_inputs(self, inputs: HullInput) -> bool: ...
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]

    def __init__(self, config: ConfigT | None = None):
        self.config = config if config is not None else self.config_type()

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        """Execute this step. Returns output model."""
        ...

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """Check that the inputs can be processed."""
        ...

    def execute(self, inputs: InputT) -> OutputT:
        """Run with logging, timing, and validation."""
        step_name = self.name or self.__class__.__name__
        logger.debug(f"[{step_name}] Validating inputs...")

        if not self.validate_inputs(inputs):
            raise ValueError(f"[{step_name}] Input validation failed")

        t0 = time.perf_counter()
        result = self.run(inputs)
        elapsed = time.perf_counter() - t0
        logger.info(f"[{step_name}] Done in {elapsed * 1000.0:.1f} ms")
        return result

    @classmethod
    def get_input_schema(cls) -> dict:
        """Return JSON schema for inputs."""
        return cls.input_type.model_json_schema()

    @classmethod
    def get_output_schema(cls) -> dict:
        """Return JSON schema for outputs."""
        return cls.output_type.model_json_schema()

    @classmethod
    def get_config_schema(cls) -> dict:
        """Return JSON schema for config."""
        return cls.config_type.model_json_schema()
