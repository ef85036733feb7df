# -*- coding: utf-8 -*-
"""Shared helpers.

SPDX-License-Identifier: Apache-2.0
"""
