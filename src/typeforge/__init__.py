"""typeforge: runtime type synthesis.

Creates new classes on demand, deriving from a base class and implementing
interfaces, with generated members:
- Access: visibility flags and inference for existing types
- Naming: backing field, implementation and unique type names
- Blueprints: in-progress types baked into real classes
- Definitions: properties, auto-properties, methods, overrides and events
- View models: notifying properties mirrored from a model type
- Factory: the entry point tying registry, naming and access together

Example:
    from typeforge import TypeFactory

    factory = TypeFactory("app.generated")
    PersonNpc = factory.create_npc_class(Person).bake()
"""

from typeforge.access import (
    AccessLevel,
    MethodAttributes,
    TypeAttributes,
    access,
    attributes_of,
    infer_access,
    infer_attributes,
    is_interface,
    type_access,
)
from typeforge.blueprint import AccessorBody, GeneratedField, GeneratedProperty, TypeBlueprint
from typeforge.builder import TypeBuilder
from typeforge.config import FactoryConfig, find_config_file, load_config
from typeforge.errors import (
    DuplicateMemberError,
    DuplicateTypeError,
    ErrorCategory,
    TypeForgeError,
)
from typeforge.factory import DEFAULT_NAMESPACE, TypeFactory
from typeforge.members import (
    EventBuildInfo,
    FieldBuildInfo,
    MemberBuildInfo,
    MethodBuildInfo,
    PropertyBuildInfo,
)
from typeforge.naming import backing_name, implementation_name, unique_type_name
from typeforge.npc import (
    EntityViewModel,
    NotifyPropertyChangeBase,
    NotifyPropertyChanged,
    PropertyChangedEventArgs,
    PropertyChangeNotificationType,
    SupportsPropertyChanged,
    change_invocator,
    notify_invocator,
)
from typeforge.reflection import ModelProperty, public_properties, read_write_properties
from typeforge.registry import (
    DynamicAssembly,
    DynamicModule,
    ModuleRegistry,
    get_module_registry,
    reset_module_registry,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "AccessLevel",
    "AccessorBody",
    "DuplicateMemberError",
    "DuplicateTypeError",
    "DynamicAssembly",
    "DynamicModule",
    "EntityViewModel",
    "ErrorCategory",
    "EventBuildInfo",
    "FactoryConfig",
    "FieldBuildInfo",
    "GeneratedField",
    "GeneratedProperty",
    "MemberBuildInfo",
    "MethodAttributes",
    "MethodBuildInfo",
    "ModelProperty",
    "ModuleRegistry",
    "NotifyPropertyChangeBase",
    "NotifyPropertyChanged",
    "PropertyBuildInfo",
    "PropertyChangeNotificationType",
    "PropertyChangedEventArgs",
    "SupportsPropertyChanged",
    "TypeAttributes",
    "TypeBlueprint",
    "TypeBuilder",
    "TypeFactory",
    "TypeForgeError",
    "access",
    "attributes_of",
    "backing_name",
    "change_invocator",
    "find_config_file",
    "get_module_registry",
    "implementation_name",
    "infer_access",
    "infer_attributes",
    "is_interface",
    "load_config",
    "notify_invocator",
    "public_properties",
    "read_write_properties",
    "reset_module_registry",
    "type_access",
    "unique_type_name",
]
