# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import logging

from ._errors import (
    BindingError,
    InvalidArgumentError,
    InvalidTargetError,
    TypeMismatchError,
)
from ._sentinel import Undefined
from .accessor import BindingMember, FieldMember, PropertyMember
from .config import BindingSettings, settings
from .discovery import (
    DiscoveryCache,
    collect_bindable,
    collect_bindable_of,
    default_cache,
    find_member,
)
from .members import FieldRef, FieldSource, PropertyRef
from .typecheck import check_assignable, is_assignable
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(settings.log_level)

__all__ = (
    "__version__",
    "BindingError",
    "BindingMember",
    "BindingSettings",
    "DiscoveryCache",
    "FieldMember",
    "FieldRef",
    "FieldSource",
    "InvalidArgumentError",
    "InvalidTargetError",
    "PropertyMember",
    "PropertyRef",
    "TypeMismatchError",
    "Undefined",
    "check_assignable",
    "collect_bindable",
    "collect_bindable_of",
    "default_cache",
    "find_member",
    "is_assignable",
    "logger",
    "settings",
)
