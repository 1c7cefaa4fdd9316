"""
Python language profile
"""

import os

from ..models import LanguageProfile

PROFILE = LanguageProfile(
    id='python',
    image=os.getenv('JUDGE_IMAGE_PYTHON', 'judge-python'),
    filename='Main.py',
    command=('python3', 'Main.py'),
)
