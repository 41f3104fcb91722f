from setuptools import setup, find_packages

setup(
    name="karaoke-lyrics",
    version="0.1.0",
    description="Decode JOY-U2 karaoke lyrics tracks and bitmap fonts into romanized, time-scheduled text blocks",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"karaoke_lyrics": ["py.typed"]},
    install_requires=[
        "construct>=2.10",
        "pykakasi>=2.2",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "karaoke-lyrics=karaoke_lyrics.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Text Processing :: Linguistic",
    ],
    keywords="karaoke lyrics joysound joy-u2 bitmap font romaji furigana",
)
