#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub abstract base classes for common functionality."""

from abc import ABC, abstractmethod
from typing import Any

from typing_extensions import Self


########################################################################################################################
# Abstract Class for Data Classes
########################################################################################################################
class RawBaseClass(ABC):
    """kspub abstract base class for common object operations.

    Provides standardized equality comparison and forces derived classes to
    implement string representation methods.
    """

    def __eq__(self, obj: Any) -> bool:
        """Check object equality.

        :param obj: Object to compare with this instance.
        :return: True if objects are equal, False otherwise.
        """
        return isinstance(obj, self.__class__) and vars(obj) == vars(self)

    def __ne__(self, obj: Any) -> bool:
        """Check if this object is not equal to another object.

        :param obj: Object to compare with this instance.
        :return: True if objects are not equal, False if they are equal.
        """
        return not self.__eq__(obj)

    @abstractmethod
    def __repr__(self) -> str:
        """Get string representation of the object."""

    @abstractmethod
    def __str__(self) -> str:
        """Get object description in string format."""


class BaseClass(RawBaseClass):
    """kspub abstract base class for serializable data objects.

    Common interface of objects that are exported to and parsed from binary
    formats (keys, certificates).
    """

    @abstractmethod
    def export(self) -> bytes:
        """Export object into bytes array.

        :return: Exported bytes.
        """

    @classmethod
    @abstractmethod
    def parse(cls, data: bytes) -> Self:
        """Parse object from bytes array.

        :param data: Input bytes array.
        :return: Parsed object.
        """
