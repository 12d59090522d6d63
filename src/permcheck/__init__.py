from .config import (
    LogLevel,
    PolicyConfig,
    SharedConfig,
    load_policy_config_from_env,
    load_shared_config_from_env,
)
from .exceptions import (
    ConfigurationError,
    DuplicateRegistrationError,
    PermCheckError,
    PermissionDeniedError,
    SecurityError,
)
from .logging import (
    safe_preview,
    redact_secrets,
    safe_log_value,
    PermCheckFormatter,
    RequestLoggerAdapter,
    setup_logging,
    get_request_logger,
)
from .interfaces import (
    ActionDescriptor,
    ChainResolver,
    ContextPermissions,
    GrantedPermissionSource,
    MappingChainResolver,
    SetupHookHandler,
    StaticPermissions,
)
from .permissions import (
    ANONYMOUS,
    SETUP_ACTION,
    AccessEvaluator,
    AccessPolicy,
    Decision,
    DenyReason,
    HttpMethod,
    OverrideResolver,
    PermissionRegistry,
    method_action,
    method_name,
    select_action,
)
from .security import (
    ActionPermissionInterceptor,
    ActionRequest,
    PermissionCheck,
    get_security_interceptors,
)

__all__ = [
    'LogLevel',
    'PolicyConfig',
    'SharedConfig',
    'load_policy_config_from_env',
    'load_shared_config_from_env',
    'ConfigurationError',
    'DuplicateRegistrationError',
    'PermCheckError',
    'PermissionDeniedError',
    'SecurityError',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'PermCheckFormatter',
    'RequestLoggerAdapter',
    'setup_logging',
    'get_request_logger',
    'ActionDescriptor',
    'ChainResolver',
    'ContextPermissions',
    'GrantedPermissionSource',
    'MappingChainResolver',
    'SetupHookHandler',
    'StaticPermissions',
    'ANONYMOUS',
    'SETUP_ACTION',
    'AccessEvaluator',
    'AccessPolicy',
    'Decision',
    'DenyReason',
    'HttpMethod',
    'OverrideResolver',
    'PermissionRegistry',
    'method_action',
    'method_name',
    'select_action',
    'ActionPermissionInterceptor',
    'ActionRequest',
    'PermissionCheck',
    'get_security_interceptors',
]
