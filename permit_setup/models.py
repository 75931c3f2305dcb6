"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Permit Setup, a product of Garudex Labs

Policy model for the administrative API.

Local, transient representations of the remote entities: resources, roles,
user attributes, condition sets (user sets and resource sets) and set
rules. Each type knows how to render itself as the JSON payload the API
expects and how to read itself back from a listing.
"""

import json
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from permit_setup.config.presets import KEY_DESCRIPTION, KEY_PATTERN, capitalize
from permit_setup.exceptions import InvalidConditionError, InvalidKeyError


SYSTEM_KEY_PREFIX = "__"


def check_key(key: str, kind: str = "key") -> str:
    """
    Validate a key against the remote naming rules.

    Keys with the reserved "__" prefix (e.g. "__user", "__autogen_company")
    are created by the service itself and are accepted as-is.

    Raises:
        InvalidKeyError: If the key does not match ``^[a-z][a-z0-9_-]*$``
    """
    if isinstance(key, str) and key.startswith(SYSTEM_KEY_PREFIX):
        return key
    if not isinstance(key, str) or not KEY_PATTERN.match(key):
        raise InvalidKeyError(f"Invalid {kind} '{key}': {KEY_DESCRIPTION}")
    return key


class AttributeType(Enum):
    """Value types a user attribute can hold."""
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    ARRAY = "array"


class ConditionOperator(Enum):
    """Operators usable in a single-attribute predicate."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    ARRAY_CONTAINS = "array_contains"


class ConditionSetType(Enum):
    """Discriminant sent with every condition set."""
    USER_SET = "userset"
    RESOURCE_SET = "resourceset"


@dataclass
class ActionDef:
    """Display metadata for one action of a resource."""

    name: str
    description: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass
class Resource:
    """
    A protected resource type and the actions it supports.

    Attributes:
        key: Unique resource key (e.g. "invoice")
        name: Display name
        description: Free-text description
        actions: Mapping of action key to its display metadata
        validate: Check the key and action keys; off for listings, which
            may hold keys the service accepted but local rules would not
    """

    key: str
    name: str
    description: str = ""
    actions: Dict[str, ActionDef] = field(default_factory=dict)
    id: Optional[str] = None
    validate: InitVar[bool] = True

    def __post_init__(self, validate: bool):
        if validate:
            check_key(self.key, "resource key")
            for action_key in self.actions:
                check_key(action_key, "action key")

    @classmethod
    def with_actions(
        cls,
        key: str,
        name: str,
        description: str = "",
        action_keys: Iterable[str] = (),
    ) -> "Resource":
        """Build a resource whose action labels are derived from the keys."""
        actions = {}
        for action in action_keys:
            label = capitalize(action)
            actions[action] = ActionDef(name=label, description=f"{label} {name.lower()}")
        return cls(key=key, name=name, description=description, actions=actions)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "actions": {k: a.to_payload() for k, a in self.actions.items()},
        }

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Resource":
        actions = {
            k: ActionDef(name=(v or {}).get("name", k), description=(v or {}).get("description", ""))
            for k, v in (data.get("actions") or {}).items()
        }
        return cls(
            key=data["key"],
            name=data.get("name", data["key"]),
            description=data.get("description") or "",
            actions=actions,
            id=data.get("id"),
            validate=False,
        )


def permission_string(resource: str, action: str) -> str:
    """``resource:action`` as used by roles and set rules."""
    return f"{resource}:{action}"


@dataclass
class Role:
    """
    A role and the permissions granted to it.

    Permissions are attached after creation, one call each; they are not
    part of the create payload.
    """

    key: str
    name: str
    description: str = ""
    permissions: List[str] = field(default_factory=list)
    validate: InitVar[bool] = True

    def __post_init__(self, validate: bool):
        if validate:
            check_key(self.key, "role key")

    def to_payload(self) -> Dict[str, Any]:
        return {"key": self.key, "name": self.name, "description": self.description}

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Role":
        return cls(
            key=data["key"],
            name=data.get("name", data["key"]),
            description=data.get("description") or "",
            permissions=list(data.get("permissions") or []),
            validate=False,
        )


@dataclass
class UserAttribute:
    """A custom attribute declared on the implicit ``__user`` resource."""

    key: str
    type: AttributeType = AttributeType.STRING
    description: str = ""
    validate: InitVar[bool] = True

    def __post_init__(self, validate: bool):
        if validate:
            check_key(self.key, "attribute key")
        if not isinstance(self.type, AttributeType):
            self.type = AttributeType(self.type)

    def to_payload(self) -> Dict[str, Any]:
        return {"key": self.key, "type": self.type.value, "description": self.description}

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "UserAttribute":
        return cls(
            key=data["key"],
            type=AttributeType(data.get("type", "string")),
            description=data.get("description") or "",
            validate=False,
        )


@dataclass
class Condition:
    """
    A single-attribute predicate, ``{"<scope>.<attribute>": {<op>: <value>}}``.

    ``scope`` is "user" for attributes passed at check time; "subject" is
    accepted when reading remote data so that it can be linted.
    """

    attribute: str
    operator: ConditionOperator
    value: Any
    scope: str = "user"

    def __post_init__(self):
        if not isinstance(self.operator, ConditionOperator):
            try:
                self.operator = ConditionOperator(self.operator)
            except ValueError:
                raise InvalidConditionError(f"Unknown condition operator '{self.operator}'")
        if not self.attribute:
            raise InvalidConditionError("Condition attribute is required")

    @property
    def path(self) -> str:
        return f"{self.scope}.{self.attribute}"

    def to_payload(self) -> Dict[str, Any]:
        return {self.path: {self.operator.value: self.value}}

    def describe(self) -> str:
        return f'{self.path} {self.operator.value} "{self.value}"'

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Condition":
        if not isinstance(data, dict) or len(data) != 1:
            raise InvalidConditionError(f"Expected a single-attribute predicate, got {data!r}")
        path, predicate = next(iter(data.items()))
        if not isinstance(predicate, dict) or len(predicate) != 1:
            raise InvalidConditionError(f"Expected a single operator for '{path}', got {predicate!r}")
        scope, _, attribute = path.partition(".")
        if not attribute:
            scope, attribute = "user", path
        operator, value = next(iter(predicate.items()))
        return cls(attribute=attribute, operator=operator, value=value, scope=scope)


@dataclass
class ConditionExpression:
    """A conjunction of predicates rendered as ``{"allOf": [...]}``."""

    all_of: List[Condition] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {"allOf": [c.to_payload() for c in self.all_of]}

    @classmethod
    def from_payload(cls, data: Optional[Dict[str, Any]]) -> "ConditionExpression":
        if not data:
            return cls()
        items = data.get("allOf")
        if items is None:
            raise InvalidConditionError(f"Unsupported condition expression: {data!r}")
        return cls(all_of=[Condition.from_payload(item) for item in items])


@dataclass
class ConditionSet:
    """
    A named predicate grouping: a user set or a resource set.

    ``conditions`` keeps the raw remote expression when it was read from a
    listing, so that client-side checks see exactly what the service holds.
    """

    key: str
    name: str
    type: ConditionSetType
    conditions: Dict[str, Any] = field(default_factory=lambda: {"allOf": []})
    description: str = ""
    resource_id: Optional[str] = None
    validate: InitVar[bool] = True

    def __post_init__(self, validate: bool):
        if validate:
            check_key(self.key, "condition set key")
        if not isinstance(self.type, ConditionSetType):
            self.type = ConditionSetType(self.type)
        if isinstance(self.conditions, ConditionExpression):
            self.conditions = self.conditions.to_payload()

    @classmethod
    def user_set(
        cls,
        key: str,
        name: str,
        conditions: Iterable[Condition] = (),
        description: str = "",
    ) -> "ConditionSet":
        expression = ConditionExpression(all_of=list(conditions))
        return cls(
            key=key,
            name=name,
            type=ConditionSetType.USER_SET,
            conditions=expression.to_payload(),
            description=description,
        )

    @classmethod
    def resource_set(
        cls,
        key: str,
        name: str,
        resource_id: str,
        conditions: Iterable[Condition] = (),
        description: str = "",
    ) -> "ConditionSet":
        expression = ConditionExpression(all_of=list(conditions))
        return cls(
            key=key,
            name=name,
            type=ConditionSetType.RESOURCE_SET,
            conditions=expression.to_payload(),
            description=description,
            resource_id=resource_id,
        )

    def serialized_conditions(self) -> str:
        return json.dumps(self.conditions, sort_keys=True)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "key": self.key,
            "name": self.name,
            "type": self.type.value,
            "conditions": self.conditions,
        }
        if self.description:
            payload["description"] = self.description
        if self.resource_id is not None:
            payload["resource_id"] = self.resource_id
        return payload

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ConditionSet":
        return cls(
            key=data["key"],
            name=data.get("name", data["key"]),
            type=ConditionSetType(data.get("type", ConditionSetType.USER_SET.value)),
            conditions=data.get("conditions") or {},
            description=data.get("description") or "",
            resource_id=data.get("resource_id"),
            validate=False,
        )


@dataclass(frozen=True)
class SetRule:
    """Grant of a permission to a user set over a resource set; the triple is its identity."""

    user_set: str
    resource_set: str
    permission: str

    @property
    def label(self) -> str:
        return f"{self.user_set} -> {self.resource_set} ({self.permission})"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "user_set": self.user_set,
            "resource_set": self.resource_set,
            "permission": self.permission,
        }

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "SetRule":
        return cls(
            user_set=data["user_set"],
            resource_set=data["resource_set"],
            permission=data["permission"],
        )
