"""Template resources used by function constructs."""

import logging
from typing import Any, Optional, Union

from funcstack.host.construct import Construct
from funcstack.host.stack import DeploymentUnit
from funcstack.host.tokens import Token, resolve_value

logger = logging.getLogger(__name__)


class CfnResource(Construct):
    """A single resource in a unit's template.

    Registered in the owning unit's arena under ``logical_id`` at creation.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        type: str,
        properties: Optional[dict[str, Any]] = None,
    ):
        super().__init__(scope, id)
        self.type = type
        self.properties: dict[str, Any] = properties or {}
        self.metadata: dict[str, Any] = {}
        self.unit = DeploymentUnit.of(self)
        self.logical_id = self.unit.allocate_logical_id(self)
        self.unit.register_resource(self)

    def ref(self) -> Token:
        return Token({"Ref": self.logical_id}, label=f"{self.logical_id}.Ref")

    def get_att(self, attribute: str) -> Token:
        return Token(
            {"Fn::GetAtt": [self.logical_id, attribute]},
            label=f"{self.logical_id}.{attribute}",
        )

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            "Type": self.type,
            "Properties": resolve_value(
                {k: v for k, v in self.properties.items() if v is not None}
            ),
        }
        if self.metadata:
            rendered["Metadata"] = dict(self.metadata)
        return rendered


class PolicyStatement:
    """An IAM policy statement."""

    def __init__(
        self,
        actions: list[str],
        resources: list[Union[str, Token]],
        effect: str = "Allow",
    ):
        self.actions = list(actions)
        self.resources = list(resources)
        self.effect = effect

    def to_template_value(self) -> dict[str, Any]:
        return {
            "Effect": self.effect,
            "Action": self.actions[0] if len(self.actions) == 1 else self.actions,
            "Resource": self.resources[0] if len(self.resources) == 1 else self.resources,
        }

    def __repr__(self) -> str:
        return f"PolicyStatement({self.effect} {self.actions} on {self.resources})"


class Role(Construct):
    """Execution role for a function, with an inline policy."""

    def __init__(self, scope: Construct, id: str):
        super().__init__(scope, id)
        self.statements: list[PolicyStatement] = []
        self.resource = CfnResource(
            self,
            "Resource",
            "AWS::IAM::Role",
            {
                "AssumeRolePolicyDocument": {
                    "Version": "2012-10-17",
                    "Statement": [
                        {
                            "Effect": "Allow",
                            "Principal": {"Service": "lambda.amazonaws.com"},
                            "Action": "sts:AssumeRole",
                        }
                    ],
                },
                "ManagedPolicyArns": [
                    "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
                ],
                "Policies": [
                    {
                        "PolicyName": "DefaultPolicy",
                        "PolicyDocument": {
                            "Version": "2012-10-17",
                            "Statement": self.statements,
                        },
                    }
                ],
            },
        )

    @property
    def role_arn(self) -> Token:
        return self.resource.get_att("Arn")

    def add_to_policy(self, statement: PolicyStatement) -> None:
        self.statements.append(statement)


class LayerVersion(Construct):
    """A layer version created in this app."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        code_path: str,
        description: str = "",
        compatible_runtimes: Optional[list[str]] = None,
    ):
        super().__init__(scope, id)
        self.resource = CfnResource(
            self,
            "Resource",
            "AWS::Lambda::LayerVersion",
            {
                "Content": {"Path": code_path},
                "Description": description or None,
                "CompatibleRuntimes": compatible_runtimes,
            },
        )

    @property
    def layer_version_arn(self) -> Union[str, Token]:
        return self.resource.ref()

    @staticmethod
    def from_layer_version_arn(
        scope: Construct, id: str, layer_version_arn: Union[str, Token]
    ) -> "ImportedLayerVersion":
        return ImportedLayerVersion(scope, id, layer_version_arn)


class ImportedLayerVersion(Construct):
    """A layer referenced by ARN; creates no template resource."""

    def __init__(self, scope: Construct, id: str, layer_version_arn: Union[str, Token]):
        super().__init__(scope, id)
        self._arn = layer_version_arn

    @property
    def layer_version_arn(self) -> Union[str, Token]:
        return self._arn


class StringParameter(Construct):
    """An SSM string parameter."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        parameter_name: str,
        string_value: Union[str, Token],
    ):
        super().__init__(scope, id)
        self.parameter_name = parameter_name
        self.resource = CfnResource(
            self,
            "Resource",
            "AWS::SSM::Parameter",
            {"Name": parameter_name, "Type": "String", "Value": string_value},
        )

    @staticmethod
    def value_for_string_parameter(scope: Construct, parameter_name: str) -> Token:
        """Read a parameter at deploy time from within ``scope``'s unit."""
        unit = DeploymentUnit.of(scope)
        parameter_id = "SsmParameterValue" + "".join(
            ch for ch in parameter_name if ch.isalnum()
        )
        unit.add_parameter(
            parameter_id,
            {"Type": "AWS::SSM::Parameter::Value<String>", "Default": parameter_name},
        )
        return Token({"Ref": parameter_id}, label=f"ssm:{parameter_name}")


class FunctionUrl(Construct):
    """Public URL endpoint for a function."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        target_function_arn: Token,
        auth_type: str,
        cors: Optional[dict[str, Any]] = None,
    ):
        super().__init__(scope, id)
        self.auth_type = auth_type
        self.cors = cors
        self.resource = CfnResource(
            self,
            "Resource",
            "AWS::Lambda::Url",
            {
                "TargetFunctionArn": target_function_arn,
                "AuthType": auth_type,
                "Cors": cors,
            },
        )

    @property
    def url(self) -> Token:
        return self.resource.get_att("FunctionUrl")
