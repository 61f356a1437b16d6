"""命令行入口包，实际逻辑位于 bundlecfg.cli.main。"""
