from setuptools import find_packages, setup

exec(open("trio_ssl_streams/_version.py", encoding="utf-8").read())

with open("LONG_DESCRIPTION.rst", encoding="utf8") as f:
    LONG_DESC = f.read()

setup(
    name="trio-ssl-streams",
    version=__version__,
    description="TLS connections as plain Trio byte streams",
    long_description=LONG_DESC,
    long_description_content_type="text/x-rst",
    license="MIT OR Apache-2.0",
    packages=find_packages(include=["trio_ssl_streams", "trio_ssl_streams.*"]),
    install_requires=[
        "trio >= 0.22.0",
        # attrs 20.1.0 adds @frozen
        "attrs >= 20.1.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "trustme",
        ],
    },
    python_requires=">=3.8",
    keywords=["async", "io", "networking", "trio", "ssl", "tls"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: Trio",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX :: BSD",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: System :: Networking",
    ],
)
