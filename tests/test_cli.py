"""Tests for the command-line interface."""

import json

from shortlinks import cli


async def run(capsys, service, *argv):
    code = await cli.main(list(argv), service=service)
    captured = capsys.readouterr()
    return code, captured


def parse_json(text):
    # The JSON document is the last thing printed
    return json.loads(text[text.index("{"):])


class TestCLI:

    async def test_shorten_and_resolve(self, capsys, service):
        code, out = await run(capsys, service, "--user", "u1", "shorten", "https://example.com/cli")

        assert code == 0
        link = parse_json(out.out)["link"]
        assert link["owner_id"] == "u1"

        code, out = await run(capsys, service, "resolve", link["code"])
        assert code == 0
        assert parse_json(out.out)["original_url"] == "https://example.com/cli"

    async def test_shorten_requires_user(self, capsys, service):
        code, out = await run(capsys, service, "shorten", "https://example.com/cli")

        assert code == 1
        assert parse_json(out.err)["error"] == "unauthenticated"

    async def test_duplicate_reports_existing(self, capsys, service):
        await run(capsys, service, "--user", "u1", "shorten", "https://example.com/cli")

        code, out = await run(capsys, service, "--user", "u1", "shorten", "https://example.com/cli")

        assert code == 1
        payload = parse_json(out.err)
        assert payload["error"] == "duplicate_conflict"
        assert payload["existing"]["original_url"] == "https://example.com/cli"

    async def test_list_and_detail(self, capsys, service):
        await run(capsys, service, "--user", "u1", "shorten", "https://example.com/one")

        code, out = await run(capsys, service, "list")
        assert code == 0
        payload = parse_json(out.out)
        assert payload["count"] == 1
        assert payload["links"][0]["created_by"] == "alice"

        record_id = payload["links"][0]["id"]
        code, out = await run(capsys, service, "detail", str(record_id))
        assert code == 1

        code, out = await run(capsys, service, "--user", "u2", "detail", str(record_id))
        assert code == 0

    async def test_delete_permissions(self, capsys, service):
        _, out = await run(capsys, service, "--user", "u1", "shorten", "https://example.com/del")
        record_id = str(parse_json(out.out)["link"]["id"])

        code, out = await run(capsys, service, "--user", "u2", "delete", record_id)
        assert code == 1
        assert parse_json(out.err)["error"] == "forbidden"

        code, out = await run(capsys, service, "--user", "root", "--roles", "Admin", "delete", record_id)
        assert code == 0

    async def test_health(self, capsys, service):
        code, out = await run(capsys, service, "health")

        assert code == 0
        assert parse_json(out.out)["statistics"]["total_links"] == 0

    async def test_no_command(self, capsys, service):
        code, _ = await run(capsys, service)

        assert code == 1
