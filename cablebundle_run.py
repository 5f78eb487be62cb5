# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the entry point script for CableBundle.
#
# ===--------------------------------------------------------------------------------------===#

import sys
from cablebundle.cli import main

if __name__ == "__main__":
    sys.exit(main())
