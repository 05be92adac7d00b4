# Copyright (C) 2024 OtpAuth Contributors
# SPDX-License-Identifier: GPL-3.0-or-later
