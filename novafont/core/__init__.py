# NovaFont - MSDF Font Asset Pipeline
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later
