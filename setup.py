from setuptools import find_packages, setup


setup(
    name="campus_admin",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp",  # HTTP-клиент
        "pydantic>=2.0",  # Модели ответов API
        "pydantic-settings>=2.0",  # Настройки из окружения
        "python-dotenv",  # Для работы с .env файлами
        "click>=8.1.0",  # Для CLI
        "rich>=13.0.0",  # Для красивого вывода
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "campus-admin=campus_admin.__main__:cli",
        ],
    },
    description="API клиент и CLI для администрирования учебного заведения",
    author="Your Name",
)
