"""Import adapter registry for convoscope.

This module provides a registry for dynamically registering
and looking up export import adapters by vendor.
"""

from convoscope.importers.base import ExportAdapter

__all__ = [
    "ImportAdapterRegistry",
]


class ImportAdapterRegistry:
    """Registry for export import adapters.

    Example:
        # Register an adapter (as decorator)
        @ImportAdapterRegistry.register
        class MyAdapter(ExportAdapter):
            ...

        # Create an adapter instance
        adapter = ImportAdapterRegistry.create("chatgpt")
        conversations = adapter.parse(raw_data)
    """

    _adapters: dict[str, type[ExportAdapter]] = {}  # noqa: RUF012

    @classmethod
    def register(
        cls,
        adapter_cls: type[ExportAdapter],
    ) -> type[ExportAdapter]:
        """Register an adapter class.

        Can be used as a decorator or called directly.

        Raises:
            ValueError: If an adapter is already registered for the vendor
        """
        vendor = str(adapter_cls().vendor)

        if vendor in cls._adapters:
            raise ValueError(f"Adapter already registered for vendor: {vendor}")

        cls._adapters[vendor] = adapter_cls
        return adapter_cls

    @classmethod
    def get(cls, vendor: str) -> type[ExportAdapter]:
        """Get adapter class by vendor name.

        Raises:
            KeyError: If no adapter registered for the vendor
        """
        if vendor not in cls._adapters:
            available = ", ".join(cls._adapters.keys()) or "none"
            raise KeyError(f"No adapter registered for vendor: {vendor}. Available: {available}")
        return cls._adapters[vendor]

    @classmethod
    def create(cls, vendor: str, **kwargs: object) -> ExportAdapter:
        """Create adapter instance by vendor name."""
        return cls.get(vendor)(**kwargs)

    @classmethod
    def list_vendors(cls) -> list[str]:
        """List all registered vendor names."""
        return list(cls._adapters.keys())

    @classmethod
    def is_registered(cls, vendor: str) -> bool:
        """Check if a vendor has a registered adapter."""
        return vendor in cls._adapters

    @classmethod
    def clear(cls) -> None:
        """Clear all registered adapters.

        Primarily for testing purposes.
        """
        cls._adapters.clear()
