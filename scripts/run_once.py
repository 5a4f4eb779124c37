#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
import os
import sys

from lookout.handler import handler

# Local runs default to keeping the screenshot in memory instead of S3
os.environ.setdefault("STORAGE_BACKEND", "inmemory")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

event = {"source": "run_once", "argv": sys.argv[1:]}
response = handler(event)
print(json.dumps(json.loads(response["body"]), indent=2))
sys.exit(0 if response["statusCode"] == 200 else 1)
