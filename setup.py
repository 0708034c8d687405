from setuptools import setup, find_packages

setup(
    name="transactional-mail-relay",
    version="0.1.0",
    description="HTTP relay for transactional email with recipient checks, spam screening and DKIM signing",
    author="",
    author_email="",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"mailrelay": ["templates/*.jinja2"]},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "Jinja2>=3.0.0",
        "email-validator>=2.0.0",
        "dnspython>=2.0.0",
        "dkimpy>=1.0.0",
        "Flask>=2.2.0",
        "Flask-Limiter>=3.0.0",
        "python-dotenv>=0.19.0",
        "click>=8.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "PyYAML>=5.4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "cryptography>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mailrelay=mailrelay.cli:main",
        ],
    },
)
