"""
Setup file.
"""

from setuptools import setup

KEYWORDS = "android aar gomobile go bindings jni ndk cross-compile packaging"


if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        include_package_data=True)
