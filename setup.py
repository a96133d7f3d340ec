from setuptools import setup

setup(
    name="sg-ip-sync",
    version="1.0.0",
    packages=["sg_ip_sync"],
    url="https://github.com/wobeng/sg-ip-sync",
    license="",
    author="wobeng",
    author_email="wobeng@yblew.com",
    description="keep security group ingress rules pointed at the current public ip",
    python_requires=">=3.8",
    install_requires=[
        "simplejson",
        "boto3",
        "botocore",
        "requests",
        "python-dotenv",
        "backoff",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "sg-ip-sync=sg_ip_sync.cmd:main",
        ],
    },
)
