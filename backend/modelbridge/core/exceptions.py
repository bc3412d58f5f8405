"""
Custom exceptions for the translation core.

Lookup, detection and malformed-input errors are normally carried inside
failure results rather than raised; execution errors are raised.
"""


class ModelBridgeError(Exception):
    """Base exception for modelbridge."""
    pass


class ValidationFailure(ModelBridgeError):
    """A model, domain or bridge definition is malformed."""
    pass


class DomainDefinitionError(ValidationFailure):
    """Exception raised when a business domain description cannot be compiled."""
    pass


class BridgeConfigurationError(ValidationFailure):
    """Exception raised when a bridge cannot be built from configuration."""
    pass


class LookupFailure(ModelBridgeError):
    """A requested model, domain or translator is not registered."""
    pass


class ModelNotFoundError(LookupFailure):
    """Exception raised when a model or entity is not registered."""
    pass


class DomainNotFoundError(LookupFailure):
    """Exception raised when a business domain was never registered."""

    def __init__(self, domain_type: str) -> None:
        super().__init__(f'Business domain "{domain_type}" not found')
        self.domain_type = domain_type


class TranslatorNotFoundError(LookupFailure):
    """Exception raised when no translator exists for an ordered model pair."""

    def __init__(self, source_model: str, target_model: str) -> None:
        super().__init__(f"No translator found for {source_model} -> {target_model}")
        self.source_model = source_model
        self.target_model = target_model


class ModelDetectionError(ModelBridgeError):
    """Exception raised when the model of an external graph cannot be inferred."""
    pass


class MalformedGraphError(ModelBridgeError):
    """Exception raised for null or non-object graphs, or graphs without a model type."""
    pass


class ExecutionFailure(ModelBridgeError):
    """Caller-supplied translator or rule logic raised."""
    pass


class TranslationExecutionError(ExecutionFailure):
    """Exception raised when a translator fails during translate()."""
    pass


class BridgeTransformationError(ExecutionFailure):
    """Exception raised when a bridge rule fails during execute()."""

    def __init__(self, message: str, rule_name: str | None = None) -> None:
        super().__init__(f"Bridge transformation failed: {message}")
        self.rule_name = rule_name
