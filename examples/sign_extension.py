import asyncio

from sign_addon import Settings, SigningClient, UploadRequest


async def main() -> None:
    settings = Settings.from_env(download_dir="dist")
    async with SigningClient(settings) as client:
        result = await client.sign(
            UploadRequest(package_path="my-extension.zip", guid="my-extension@example.com", version="1.0")
        )

    if result.success:
        print("The following signed files were downloaded:")
        print(result.downloaded_file_paths)
        print("Your extension ID is:")
        print(result.id)
    else:
        print("Your add-on could not be signed!")
        print(f"Error code: {result.error_code}")
        print(f"Details: {result.error_details}")


if __name__ == "__main__":
    asyncio.run(main())
