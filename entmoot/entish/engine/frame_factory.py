from typing import Type, Optional
import logging

from .frame import Frame
from .config import config

logger = logging.getLogger(__name__)

# Known storage backends, by configuration name.
FRAME_IMPLEMENTATIONS = ("pandas",)


class FrameFactory:
    """Factory for creating Frame instances based on configuration."""

    _implementation = None
    _frame_class = None
    _implementation_config = None

    @classmethod
    def initialize(cls) -> None:
        """Initialize the factory with the implementation from configuration."""
        if cls._frame_class is None:
            impl_name = config.get_frame_implementation()
            cls.set_implementation(impl_name)

    @classmethod
    def get_implementation(cls) -> Type[Frame]:
        """Get the current Frame implementation class."""
        if cls._frame_class is None:
            cls.initialize()
        return cls._frame_class

    @classmethod
    def set_implementation(cls, implementation: str) -> None:
        """Set the Frame implementation to use.

        Args:
            implementation: Implementation name, one of FRAME_IMPLEMENTATIONS
        """
        if implementation not in FRAME_IMPLEMENTATIONS:
            error_msg = f"Unknown Frame implementation: {implementation}. Valid options: {list(FRAME_IMPLEMENTATIONS)}"
            logger.error(error_msg)
            raise ValueError(error_msg)

        cls._implementation = implementation
        cls._implementation_config = config.get_implementation_config(implementation)

        logger.debug(f"Setting Frame implementation to '{implementation}'")

        if implementation == "pandas":
            from .pandas_impl.frame import PandasFrame
            cls._frame_class = PandasFrame
            PandasFrame.configure(cls._implementation_config)

    @classmethod
    def reset(cls) -> None:
        cls._frame_class = None
        cls._implementation = None
        cls._implementation_config = None

    @classmethod
    def get_current_implementation_name(cls) -> Optional[str]:
        return cls._implementation
