from setuptools import setup

setup(
    name='soontm',
    version='0.3.0',
    packages=[
        'soontm',
        'soontm.features',
        'soontm.features.rfc1459',
        'soontm.features.ircv3',
        'soontm.utils'
    ],
    python_requires='>=3.7',
    install_requires=['pure-sasl >=0.1.6'],  # SASL PLAIN for soontm.features.ircv3.sasl
    extras_require={
        'tests': ['pytest', 'pytest-asyncio'],  # collect and run tests
        'coverage': 'pytest-cov'                # get test case coverage
    },
    entry_points={
        'console_scripts': [
            'soontm = soontm.utils.run:main'
        ]
    },

    author='soontm contributors',
    keywords='irc client library bot python3 ircv3 sasl',
    description='A small, event-driven IRCv3 client core for bots.',
    license='BSD',

    zip_safe=True,
    test_suite='tests'
)
