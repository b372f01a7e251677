"""Route test helpers."""


async def submit(client, message="hello wall", author=None) -> str:
    """POST /wall and return the pendingId from the redirect."""
    data = {"message": message}
    if author is not None:
        data["author"] = author
    res = await client.post("/wall", data=data)
    assert res.status_code == 303
    return res.headers["location"].split("pendingId=", 1)[1]
