#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""kspub cryptographic type definitions and enumerations."""

from cryptography import utils
from cryptography.hazmat.primitives.serialization import Encoding

from kspub.exceptions import KSPError


class KSPEncoding(utils.Enum):
    """kspub cryptographic encoding enumeration.

    Encodings of keys and certificates supported by kspub with helpers for
    conversion to the cryptography library encodings and detection of the
    encoding of a data blob.
    """

    PEM = "PEM"
    DER = "DER"

    @staticmethod
    def get_cryptography_encodings(encoding: "KSPEncoding") -> Encoding:
        """Get cryptography library encoding from kspub encoding.

        :param encoding: kspub encoding type to convert.
        :raises KSPError: If the encoding format is not supported by cryptography.
        :return: Corresponding cryptography library encoding.
        """
        cryptography_encoding = {
            KSPEncoding.PEM: Encoding.PEM,
            KSPEncoding.DER: Encoding.DER,
        }.get(encoding)
        if cryptography_encoding is None:
            raise KSPError(f"{encoding} format is not supported by cryptography.")
        return cryptography_encoding

    @staticmethod
    def get_file_encodings(data: bytes) -> "KSPEncoding":
        """Determine encoding type of cryptographic data.

        Data which decode as UTF-8 and contain the PEM armor dashes are PEM,
        everything else is considered DER.

        :param data: Raw bytes of the data file to analyze for encoding detection.
        :return: Detected encoding type.
        """
        encoding = KSPEncoding.PEM
        try:
            decoded = data.decode("utf-8")
        except UnicodeDecodeError:
            encoding = KSPEncoding.DER
        else:
            if decoded.find("----") == -1:
                encoding = KSPEncoding.DER
        return encoding

