# 
# Copyright (c) 2019 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import re
from pathlib import Path
from typing import Any, Match, Optional
from setuptools import setup

package_name: str = "wego"

with Path(package_name).joinpath("__init__.py").open("r") as f:
    init_text = f.read()
    version: Optional[Match[Any]] = re.search(r'__version__\s*=\s*[\'\"](.+?)[\'\"]', init_text)
    license: Optional[Match[Any]] = re.search(r'__license__\s*=\s*[\'\"](.+?)[\'\"]', init_text)
    author: Optional[Match[Any]] = re.search(r'__author__\s*=\s*[\'\"](.+?)[\'\"]', init_text)
    author_email: Optional[Match[Any]] = re.search(r'__author_email__\s*=\s*[\'\"](.+?)[\'\"]', init_text)
    url: Optional[Match[Any]] = re.search(r'__url__\s*=\s*[\'\"](.+?)[\'\"]', init_text)

if version is not None and license is not None and author is not None and author_email is not None and url is not None:
    setup(name=package_name,
        packages=[package_name, f"{package_name}.corpus"],
        version=version.group(1),
        license=license.group(1),
        author=author.group(1),
        author_email=author_email.group(1),
        url=url.group(1),
        python_requires=">=3.8",
        install_requires=["numpy", "scipy", "tqdm", "wget"],
        extras_require={
            "test": ["pytest"],
            "examples": ["gensim"],
        },
        entry_points={"console_scripts": ["wego=wego.cli:main"]})
