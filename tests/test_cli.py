"""命令行测试"""

import json

from bridge_router.cli import build_parser, main


class TestCli:
    """bridge-router命令"""

    def test_parser_requires_command(self):
        """测试quote子命令参数"""
        args = build_parser().parse_args(
            ["quote", "--from-chain", "ethereum", "--to-chain", "polygon",
             "--token", "USDC", "--amount", "100", "--strategy", "fastest"]
        )
        assert args.command == "quote"
        assert args.source_chain == "ethereum"
        assert args.strategy == "fastest"

    def test_providers_command(self, capsys):
        """测试列出内置Provider"""
        assert main(["providers"]) == 0
        providers = json.loads(capsys.readouterr().out)
        assert [p["id"] for p in providers] == ["stargate", "squid", "hop", "cbridge", "soroswap"]

    def test_quote_command(self, capsys):
        """测试获取报价"""
        code = main(
            ["quote", "--from-chain", "ethereum", "--to-chain", "arbitrum",
             "--token", "USDC", "--amount", "2500", "--strategy", "lowest-cost"]
        )
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["rankingStrategy"] == "lowest-cost"
        assert data["bestRoute"]["rankingPosition"] == 1
        assert data["totalProviders"] == 4

    def test_unsupported_route_exit_code(self, capsys):
        """测试不支持的路由返回非0并输出错误"""
        code = main(
            ["quote", "--from-chain", "solana", "--to-chain", "polygon",
             "--token", "USDC", "--amount", "1"]
        )
        assert code == 1
        err = capsys.readouterr().err
        assert '"error_code": "E1200"' in err

    def test_invalid_amount_exit_code(self, capsys):
        """测试非法金额返回2"""
        code = main(
            ["quote", "--from-chain", "ethereum", "--to-chain", "polygon",
             "--token", "USDC", "--amount", "lots"]
        )
        assert code == 2
