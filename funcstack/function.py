"""Function construct.

Declares one function in the current unit:

1. Merge props with the unit's default function props
2. Validate and normalize everything that can be rejected; a bad
   declaration fails here, before anything is added to the tree
3. Write the function node with placeholder or bridge code, depending on
   the build mode
4. Resolve layers, attach permissions, bind resources, add a URL
5. In deferred mode, register the build-and-patch task, then record the
   final props in the pass's FunctionRegistry
"""

import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from funcstack.build.dispatcher import (
    BRIDGE_ACTIONS,
    BuildMode,
    initial_code,
    schedule_build,
    select_build_mode,
)
from funcstack.errors import FunctionConfigurationError
from funcstack.functions.merge import apply_defaults, merge_props
from funcstack.functions.normalize import (
    normalize_disk_size,
    normalize_log_retention,
    normalize_memory_size,
    normalize_timeout,
)
from funcstack.functions.schemas import (
    DEFAULT_RUNTIME,
    SUPPORTED_RUNTIMES,
    AllPermissions,
    FunctionProps,
    Permissions,
)
from funcstack.functions.url import resolve_url_settings
from funcstack.host.app import App
from funcstack.host.binding import (
    Bindable,
    BindingVariable,
    FunctionBinding,
    bind_environment,
    bind_permissions,
)
from funcstack.host.construct import Construct
from funcstack.host.permissions import attach_permissions_to_role, statements_for_grant
from funcstack.host.resources import CfnResource, FunctionUrl, PolicyStatement, Role
from funcstack.host.stack import DeploymentUnit
from funcstack.host.tokens import Token
from funcstack.references.resolver import ReferenceResolver

logger = logging.getLogger(__name__)

_ARCHITECTURES = {"arm_64": "arm64", "x86_64": "x86_64"}
_TRACING_MODES = {"active": "Active", "pass_through": "PassThrough", "disabled": None}

FunctionDefinition = Union[str, "Function", FunctionProps, dict]


def _check_bindable(function_id: str, construct: Any) -> None:
    if not isinstance(construct, Bindable):
        raise FunctionConfigurationError(
            f'Cannot bind {construct!r} to the "{function_id}" function'
        )


class Function(Construct):
    """A function with deferred builds and live development support.

    Usage:
        Function(unit, "MyFunction", FunctionProps(handler="src/lambda.main"))
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        props: Optional[FunctionProps] = None,
    ):
        app = App.of(scope)
        unit = DeploymentUnit.of(scope)
        deployment_pass = app.deployment_pass

        props = apply_defaults(unit.default_function_props, props)
        runtime = props.runtime or DEFAULT_RUNTIME
        if runtime not in SUPPORTED_RUNTIMES:
            raise FunctionConfigurationError(
                f'The specified runtime is not supported for the "{id}" function: {runtime}'
            )
        if runtime == "go1.x":
            logger.warning(
                f'Runtime "go1.x" is deprecated for the "{id}" function, use "go" instead'
            )
        props = props.model_copy(update={"runtime": runtime})

        if not props.handler:
            raise FunctionConfigurationError(f'No handler defined for the "{id}" Lambda function')

        memory_size = normalize_memory_size(props.memory_size)
        disk_size = normalize_disk_size(props.disk_size)
        timeout = normalize_timeout(props.timeout)
        retention_days = normalize_log_retention(props.log_retention)
        tracing_mode = _TRACING_MODES[props.tracing or "active"]

        build_mode = select_build_mode(app.mode, props.enable_live_dev)
        if build_mode == BuildMode.DEFERRED_BUILD and app.toolchain is None:
            raise FunctionConfigurationError(
                f'No build toolchain configured to build the "{id}" function'
            )

        # Reject bad grants and bind targets before the node is added
        if not isinstance(props.permissions, AllPermissions):
            for grant in props.permissions or []:
                statements_for_grant(grant)
        for construct in props.bind or []:
            _check_bindable(id, construct)
        ReferenceResolver.check_layers(props.layers)

        function_name = props.function_name
        if callable(function_name):
            function_name = function_name(unit, props)

        super().__init__(scope, id)
        self.id = id
        self.props = props
        self.build_mode = build_mode
        self.is_live_dev_enabled = props.enable_live_dev is not False
        self.function_url: Optional[FunctionUrl] = None
        self.environment: dict[str, Union[str, Token]] = dict(props.environment or {})

        fragment = initial_code(self.build_mode, app.debug_increase_timeout)

        layers = []
        if fragment.attach_layers:
            layers = deployment_pass.references.resolve_layers(scope, id, props.layers)

        self.role = Role(self, "ServiceRole")
        self.resource = CfnResource(
            self,
            "Resource",
            "AWS::Lambda::Function",
            {
                "FunctionName": function_name,
                "Code": fragment.code,
                "Handler": fragment.handler,
                "Runtime": fragment.runtime,
                "Role": self.role.role_arn,
                "MemorySize": memory_size,
                "Timeout": fragment.timeout_override or timeout,
                "EphemeralStorage": {"Size": disk_size},
                "Architectures": (
                    [_ARCHITECTURES[props.architecture]] if props.architecture else None
                ),
                "TracingConfig": {"Mode": tracing_mode} if tracing_mode else None,
                "Environment": {"Variables": self.environment},
                "Layers": [layer.layer_version_arn for layer in layers] or None,
            },
        )

        if fragment.retry_attempts is not None:
            CfnResource(
                self,
                "EventInvokeConfig",
                "AWS::Lambda::EventInvokeConfig",
                {
                    "FunctionName": self.resource.ref(),
                    "Qualifier": "$LATEST",
                    "MaximumRetryAttempts": fragment.retry_attempts,
                },
            )

        if retention_days is not None:
            CfnResource(
                self,
                "LogRetention",
                "AWS::Logs::LogGroup",
                {
                    "LogGroupName": f"/aws/lambda/{function_name or id}",
                    "RetentionInDays": retention_days,
                },
            )

        if self.build_mode == BuildMode.LIVE_BRIDGE:
            self.add_environment("SST_FUNCTION_ID", self.node.addr)
            self.attach_permissions([PolicyStatement(actions=BRIDGE_ACTIONS, resources=["*"])])

        if runtime.startswith("nodejs"):
            # Reuse HTTP connections with Keep-Alive in Node functions
            self.add_environment("AWS_NODEJS_CONNECTION_REUSE_ENABLED", "1")

        self.attach_permissions(props.permissions or [])

        self.add_environment("SST_APP", app.name)
        self.add_environment("SST_STAGE", app.stage)
        self.add_environment("SST_SSM_PREFIX", app.ssm_prefix or "")
        self.bind(props.bind or [])

        self._create_url()

        if self.build_mode == BuildMode.DEFERRED_BUILD:
            schedule_build(
                deployment_pass.tasks,
                app.toolchain,
                app.assets,
                unit,
                self.resource.logical_id,
                self.node.addr,
                props,
            )
        deployment_pass.functions.register(self.node.addr, props)
        logger.debug(f"Declared function {id} ({self.build_mode.value}) in {unit.node.id}")

    # ------------------------------------------------------------------

    @property
    def function_arn(self) -> Token:
        return self.resource.get_att("Arn")

    @property
    def function_name(self) -> Token:
        return self.resource.ref()

    @property
    def url(self) -> Optional[Token]:
        """The generated URL of the function, if it has one."""
        return self.function_url.url if self.function_url else None

    def add_environment(self, key: str, value: Union[str, Token]) -> None:
        self.environment[key] = value

    def bind(self, constructs: list[Any]) -> None:
        """Bind resources: add their environment variables and permissions."""
        for construct in constructs:
            _check_bindable(self.id, construct)
        for construct in constructs:
            self._bind_environment(construct)
            for action, resources in bind_permissions(construct).items():
                self.role.add_to_policy(
                    PolicyStatement(actions=[action], resources=list(resources))
                )

    def _bind_environment(self, construct: Bindable) -> None:
        for key, value in bind_environment(construct).items():
            self.add_environment(key, value)

    def attach_permissions(self, permissions: Permissions) -> None:
        """Grant permissions to the function's role."""
        attach_permissions_to_role(self.role, permissions)

        # Bound resources granted as permissions also need their config
        if not isinstance(permissions, AllPermissions):
            for grant in permissions:
                if isinstance(grant, Bindable):
                    self._bind_environment(grant)

    def _create_url(self) -> None:
        settings = resolve_url_settings(self.props.url)
        if settings is None:
            return
        auth_type, cors = settings
        self.function_url = FunctionUrl(
            self, "FunctionUrl", self.function_arn, auth_type=auth_type, cors=cors
        )

    def get_construct_metadata(self) -> dict[str, Any]:
        secrets = []
        for construct in self.props.bind or []:
            binding = construct.get_function_binding()
            if binding is not None and binding.client_package == "secret":
                secrets.append(construct.node.id)
        return {
            "type": "Function",
            "data": {
                "arn": self.function_arn,
                "localId": self.node.addr,
                "secrets": secrets,
            },
        }

    def get_function_binding(self) -> FunctionBinding:
        return FunctionBinding(
            client_package="function",
            variables={
                "functionName": BindingVariable(
                    environment=self.function_name,
                    parameter=self.function_name,
                )
            },
            permissions={"lambda:*": [self.function_arn]},
        )

    # ------------------------------------------------------------------

    @staticmethod
    def is_inline_definition(definition: Any) -> bool:
        return isinstance(definition, (str, Function))

    @staticmethod
    def from_definition(
        scope: Construct,
        id: str,
        definition: FunctionDefinition,
        inherited_props: Optional[FunctionProps] = None,
        inherit_error_message: Optional[str] = None,
    ) -> "Function":
        """Create (or pass through) a function from a loose definition.

        Args:
            definition: Handler string, existing Function, FunctionProps or dict
            inherited_props: Props inherited from the parent construct
            inherit_error_message: Error used when props cannot be inherited

        Raises:
            FunctionConfigurationError: If the definition is invalid
        """
        if isinstance(definition, str):
            base = inherited_props or FunctionProps()
            return Function(scope, id, base.model_copy(update={"handler": definition}))

        if isinstance(definition, Function):
            if inherited_props is not None and inherited_props.has_fields():
                raise FunctionConfigurationError(
                    inherit_error_message
                    or "Cannot inherit default props when a Function is provided"
                )
            return definition

        if isinstance(definition, dict):
            try:
                definition = FunctionProps.model_validate(definition)
            except ValidationError as e:
                raise FunctionConfigurationError(
                    f'Invalid function definition for the "{id}" Function: {e}'
                ) from e

        if isinstance(definition, FunctionProps) and definition.handler is not None:
            return Function(scope, id, merge_props(inherited_props, definition))

        raise FunctionConfigurationError(f'Invalid function definition for the "{id}" Function')
