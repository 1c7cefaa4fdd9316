"""
Java language profile
"""

import os

from ..models import LanguageProfile

PROFILE = LanguageProfile(
    id='java',
    image=os.getenv('JUDGE_IMAGE_JAVA', 'judge-java'),
    filename='Main.java',
    # The public class must be named Main to match the file name
    command=('bash', '-c', 'javac Main.java && java Main'),
    compile_error_marker='error:',
)
