"""
Vercel entry point for the Support Desk API
"""
import os
import sys

# Serverless builds ship the source tree without installing the package
src_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

os.environ.setdefault("ENVIRONMENT", "production")

from mangum import Mangum
from support_desk.main import app

# Lifespan runs per cold start so the database and demo data are initialized
handler = Mangum(app, lifespan="auto")
