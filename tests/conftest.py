import os
import sys

# Ensure the 'src' directory is in the python path so we can import kubeadmit
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
# ...and the builders module next to the tests
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
