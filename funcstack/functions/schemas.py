"""Function definition schemas.

FunctionProps is the declarative description of one compute unit. Every
field is optional so that partial props (unit defaults, inherited props)
can be merged; an absent field is ``None``, never an empty container.

Key design: the universal permission grant is a tagged variant
(``ALL_PERMISSIONS``) rather than the string "*" mixed into a list.
"""

from typing import Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Runtimes
# ============================================================================

DEFAULT_RUNTIME = "nodejs16.x"

# Declared runtime -> runtime identifier written into the template
SUPPORTED_RUNTIMES: dict[str, str] = {
    "rust": "provided.al2",
    "nodejs": "nodejs",
    "nodejs4.3": "nodejs4.3",
    "nodejs6.10": "nodejs6.10",
    "nodejs8.10": "nodejs8.10",
    "nodejs10.x": "nodejs10.x",
    "nodejs12.x": "nodejs12.x",
    "nodejs14.x": "nodejs14.x",
    "nodejs16.x": "nodejs16.x",
    "nodejs18.x": "nodejs18.x",
    "python2.7": "python2.7",
    "python3.6": "python3.6",
    "python3.7": "python3.7",
    "python3.8": "python3.8",
    "python3.9": "python3.9",
    "dotnetcore1.0": "dotnetcore1.0",
    "dotnetcore2.0": "dotnetcore2.0",
    "dotnetcore2.1": "dotnetcore2.1",
    "dotnetcore3.1": "dotnetcore3.1",
    "dotnet6": "dotnet6",
    "java8": "java8",
    "java11": "java11",
    "go1.x": "provided.al2",
    "go": "provided.al2",
}

Architecture = Literal["arm_64", "x86_64"]
Tracing = Literal["active", "pass_through", "disabled"]


# ============================================================================
# Permissions
# ============================================================================


class AllPermissions:
    """Grant on every action and resource. Use the ALL_PERMISSIONS singleton."""

    _instance: Optional["AllPermissions"] = None

    def __new__(cls) -> "AllPermissions":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL_PERMISSIONS"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AllPermissions) or other == "*"

    def __hash__(self) -> int:
        return hash("*")


ALL_PERMISSIONS = AllPermissions()

# Either every permission, or an explicit list of grants. A grant is a
# service name ("s3"), an action ("s3:GetObject"), a PolicyStatement, or a
# bindable resource.
Permissions = Union[AllPermissions, list[Any]]


def normalize_permissions(value: Any) -> Any:
    """Map "*" (alone or as a list member) to ALL_PERMISSIONS."""
    if isinstance(value, AllPermissions):
        return value
    if isinstance(value, str) and value == "*":
        return ALL_PERMISSIONS
    if isinstance(value, (list, tuple)):
        if any(isinstance(g, str) and g == "*" for g in value):
            return ALL_PERMISSIONS
        return list(value)
    return value


# ============================================================================
# Sub-models
# ============================================================================


class FunctionUrlCorsProps(BaseModel):
    """CORS settings for a function URL."""

    allow_credentials: Optional[bool] = None
    allow_headers: Optional[list[str]] = None
    allow_methods: Optional[list[str]] = None
    allow_origins: Optional[list[str]] = None
    expose_headers: Optional[list[str]] = None
    max_age: Optional[Union[int, str]] = Field(
        default=None,
        description="Seconds, or a duration string such as '1 day'",
    )


class FunctionUrlProps(BaseModel):
    """Function URL configuration."""

    authorizer: Literal["none", "iam"] = "none"
    cors: Optional[Union[bool, FunctionUrlCorsProps]] = Field(
        default=None,
        description="None means CORS enabled with permissive defaults",
    )


class FunctionHooks(BaseModel):
    """Callbacks run by the build toolchain around each build."""

    before_build: Optional[Callable[..., Any]] = None
    after_build: Optional[Callable[..., Any]] = None


class FunctionCopyFilesProps(BaseModel):
    """Extra files copied into the function bundle."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(..., alias="from", description="Source path relative to the project")
    to: Optional[str] = Field(default=None, description="Destination inside the bundle")


class JavaProps(BaseModel):
    """Java-specific build options."""

    build_task: Optional[str] = None
    build_output_dir: Optional[str] = None
    experimental_use_provided_runtime: Optional[Literal["provided", "provided.al2"]] = Field(
        default=None,
        description="Deploy on a provided runtime instead of the Java runtime",
    )


# ============================================================================
# Main Definition
# ============================================================================


class FunctionProps(BaseModel):
    """Declarative props for one function."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    # Code
    handler: Optional[str] = Field(
        default=None,
        description="Path to the entry point and handler function",
        examples=["src/lambda.main"],
    )
    runtime: Optional[str] = Field(default=None, examples=["nodejs18.x", "python3.9"])
    copy_files: Optional[list[FunctionCopyFilesProps]] = None
    java: Optional[JavaProps] = None
    hooks: Optional[FunctionHooks] = None

    # Limits
    memory_size: Optional[Union[int, str]] = Field(
        default=None,
        description="MB, or a size string such as '2 GB'",
    )
    disk_size: Optional[Union[int, str]] = Field(
        default=None,
        description="MB of ephemeral storage, or a size string",
    )
    timeout: Optional[Union[int, str]] = Field(
        default=None,
        description="Seconds, or a duration string such as '30 seconds'",
    )
    architecture: Optional[Architecture] = None
    tracing: Optional[Tracing] = None
    log_retention: Optional[str] = Field(default=None, examples=["one_week"])

    # Naming
    function_name: Optional[Union[str, Callable[..., str]]] = None

    # Wiring
    environment: Optional[dict[str, str]] = None
    bind: Optional[list[Any]] = None
    permissions: Optional[Permissions] = None
    layers: Optional[list[Any]] = Field(
        default=None,
        description="Layer ARNs or layer constructs",
    )
    url: Optional[Union[bool, FunctionUrlProps]] = None

    # Live development
    enable_live_dev: Optional[bool] = None

    @field_validator("permissions", mode="before")
    @classmethod
    def _normalize_permissions(cls, value: Any) -> Any:
        return normalize_permissions(value)

    def has_fields(self) -> bool:
        """Whether any field is set."""
        return any(getattr(self, name) is not None for name in type(self).model_fields)


class FunctionSummary(BaseModel):
    """Lightweight function info for listing endpoints."""

    address: str
    handler: Optional[str] = None
    runtime: Optional[str] = None
    memory_size: Optional[Union[int, str]] = None
    timeout: Optional[Union[int, str]] = None
    environment: dict[str, str] = Field(default_factory=dict)
    permissions: Union[Literal["*"], list[str]] = Field(default_factory=list)
    layer_count: int = 0
    bind_count: int = 0

    @classmethod
    def from_props(cls, address: str, props: FunctionProps) -> "FunctionSummary":
        if isinstance(props.permissions, AllPermissions):
            permissions: Union[str, list[str]] = "*"
        else:
            permissions = [
                g if isinstance(g, str) else type(g).__name__
                for g in (props.permissions or [])
            ]
        return cls(
            address=address,
            handler=props.handler,
            runtime=props.runtime,
            memory_size=props.memory_size,
            timeout=props.timeout,
            environment=dict(props.environment or {}),
            permissions=permissions,
            layer_count=len(props.layers or []),
            bind_count=len(props.bind or []),
        )
