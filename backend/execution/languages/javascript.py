"""
JavaScript (Node.js) language profile
"""

import os

from ..models import LanguageProfile

PROFILE = LanguageProfile(
    id='javascript',
    image=os.getenv('JUDGE_IMAGE_JAVASCRIPT', 'node:20-alpine'),
    filename='Main.js',
    command=('node', 'Main.js'),
)
