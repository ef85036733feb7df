# -*- coding: utf-8 -*-
"""Helm Version Manager.

Release listing, chart upgrades and rollbacks, registry mappings and the
values editor codec.

SPDX-License-Identifier: Apache-2.0
"""

__version__ = "0.1.0"
