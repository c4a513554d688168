"""
Centralized exception definitions for tplkit.
"""

class ErrorContext:
    """Context information for errors."""
    
    def __init__(self, component: str = None, operation: str = None, **kwargs):
        self.component = component
        self.operation = operation
        self.details = kwargs

class TemplateKitError(Exception):
    """Base class for all tplkit errors."""
    
    def __init__(self, message: str, context: ErrorContext = None, details: dict = None):
        super().__init__(message)
        self.context = context or ErrorContext()
        self.details = details or {}
        
    def __str__(self):
        base_str = super().__str__()
        if self.context.component and self.context.operation:
            return f"{base_str} [in {self.context.component}.{self.context.operation}]"
        return base_str

class BuildError(TemplateKitError):
    """Error while constructing a registry."""
    pass

class ReadError(BuildError):
    """A fragment file could not be read."""
    pass

class ParseError(BuildError):
    """A fragment failed to parse."""
    
    def __init__(self, message: str, context: ErrorContext = None, details: dict = None,
                 lineno: int = None):
        super().__init__(message, context, details)
        self.lineno = lineno

class InvalidSpecError(BuildError):
    """The composite specification is invalid."""
    pass

class UnknownTemplateError(TemplateKitError):
    """Render was asked for a template the registry does not hold."""
    pass

class RenderError(TemplateKitError):
    """Template execution failed."""
    pass

class ConfigurationError(TemplateKitError):
    """Error in configuration."""
    pass
