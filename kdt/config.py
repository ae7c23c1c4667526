"""
Runtime configuration, read from the environment.

A ``.env`` file in the working directory is loaded first, so any of these can
be set there instead of exported in the shell.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Key database location
DATABASE_PATH = os.environ.get('KDT_DATABASE_PATH') or os.path.join(os.getcwd(), 'kdt_keys.sqlite')

# Primitive selection; keys generated under one setting only work under the same setting
KEM_ALGORITHM = os.environ.get('KDT_KEM_ALGORITHM', 'Kyber768')
SIG_ALGORITHM = os.environ.get('KDT_SIG_ALGORITHM', 'Dilithium3')

LOG_LEVEL = os.environ.get('KDT_LOG_LEVEL', 'WARNING').upper()
