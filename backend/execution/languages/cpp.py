"""
C++ language profile
"""

import os

from ..models import LanguageProfile

PROFILE = LanguageProfile(
    id='cpp',
    image=os.getenv('JUDGE_IMAGE_CPP', 'judge-cpp'),
    filename='Main.cpp',
    # Compile and run in one shell so a compiler failure surfaces as a non-zero exit
    command=('bash', '-c', 'g++ Main.cpp -o main && ./main'),
    compile_error_marker='error:',
)
