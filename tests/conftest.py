import os
import sys

# Adjust path to find modules when the package is not installed
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
