# 
# Copyright (c) 2020 Minato Sato
# All rights reserved.
#
# This source code is licensed under the license found in the
# LICENSE file in the root directory of this source tree.
#

import logging
import zipfile
from pathlib import Path
from typing import Optional
from typing import TextIO

import wget

logger = logging.getLogger(__name__)

URLS = {
    "en": "http://mattmahoney.net/dc/text8.zip",
    "ja": "https://s3-ap-northeast-1.amazonaws.com/dev.tech-sketch.jp/chakki/public/ja.text8.zip",
}


class Text8(object):
    """The text8 benchmark corpus, downloaded into ``~/.wego`` on first use."""
    path: Path

    def __init__(self, lang: str = "en", root: Optional[Path] = None) -> None:
        fname: str
        if lang == "en":
            fname = "text8"
        elif lang == "ja":
            fname = "ja.text8"
        else:
            raise ValueError("An argument 'lang' must be 'en' or 'ja'.")

        self.root: Path = root if root is not None else Path.home().joinpath(".wego")
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = self.root.joinpath(fname)

        if not self.path.exists():
            zip_path: Path = self.path.parent.joinpath(self.path.name + ".zip")
            if not zip_path.exists():
                logger.info("downloading %s", URLS[lang])
                wget.download(URLS[lang], out=str(zip_path))

            with zipfile.ZipFile(zip_path) as zf:
                zf.extractall(self.path.parent)

    def open(self) -> TextIO:
        return self.path.open("r", encoding="utf-8")
