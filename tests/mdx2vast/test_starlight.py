"""Astro Starlight documents."""

import pytest

from mdx2vast import to_vale_ast

STARLIGHT_IMPORT = (
    "import { Aside, Card, CardGrid, LinkCard, Steps, Tabs, TabItem, FileTree, Badge, Icon } "
    "from '@astrojs/starlight/components';\n\n"
)


def convert(body: str) -> str:
    return to_vale_ast(STARLIGHT_IMPORT + body)


class TestDetection:
    def test_any_astrojs_package(self):
        assert 'data-component="Card"' in to_vale_ast("import Something from '@astrojs/whatever';\n\n<Card>content</Card>")

    def test_mention_in_leading_comment(self):
        text = "// Using @astrojs/starlight\nimport { Aside } from '@astrojs/starlight/components';\n\n<Aside>Note content</Aside>"
        assert 'data-component="Aside"' in to_vale_ast(text)

    def test_no_import_single_line(self):
        html = to_vale_ast("<Aside>content</Aside>")
        assert '<code class="mdxNode' in html
        assert "&lt;Aside&gt;" in html


class TestAside:
    @pytest.mark.parametrize("kind", ["note", "tip", "caution", "danger"])
    def test_types(self, kind):
        html = convert(f'<Aside type="{kind}">Careful **now**</Aside>')
        assert 'data-component="Aside"' in html
        assert "<strong>now</strong>" in html

    def test_markdown_formatting(self):
        html = convert("<Aside>\nUse `inline code`, **bold** and *italic*.\n</Aside>")
        assert "<code>inline code</code>" in html
        assert "<strong>bold</strong>" in html
        assert "<em>italic</em>" in html

    def test_link(self):
        html = convert("<Aside>\nSee [the docs](https://docs.astro.build).\n</Aside>")
        assert '<a href="https://docs.astro.build">the docs</a>' in html

    def test_lists(self):
        html = convert('<Aside type="tip">\n- Option A\n- Option B\n</Aside>\n\n<Aside>\n1. First\n2. Second\n</Aside>')
        assert "<ul>\n<li>Option A</li>" in html
        assert "<ol>\n<li>First</li>" in html

    def test_code_block_and_heading(self):
        html = convert('<Aside type="tip">\n### Important Note\n\n```js\nconst x = 1;\n```\n</Aside>')
        assert "<h3>Important Note</h3>" in html
        assert '<pre><code class="language-js">const x = 1;\n</code></pre>' in html


class TestCards:
    def test_link_card_with_multiline_tag(self):
        text = (
            "<LinkCard\n"
            '  title="Documentation"\n'
            '  description="Read the full documentation"\n'
            '  href="/docs"\n'
            ">\n"
            "Additional info about the documentation.\n"
            "</LinkCard>"
        )
        html = convert(text)
        assert 'data-component="LinkCard"' in html
        assert "<p>Additional info about the documentation.</p>" in html

    def test_link_cards_in_grid(self):
        text = (
            "<CardGrid>\n"
            '  <LinkCard title="Guide" href="/guide">Start here</LinkCard>\n'
            '  <LinkCard title="API" href="/api">Reference docs</LinkCard>\n'
            "</CardGrid>"
        )
        html = convert(text)
        assert 'data-component="CardGrid"' in html
        assert html.count('data-component="LinkCard"') == 2

    def test_expression_child_stays_code(self):
        html = convert('<Card title="Dynamic">\n{someVariable}\n</Card>')
        assert 'data-component="Card"' in html
        assert '<code class="mdxNode mdxFlowExpression">{someVariable}</code>' in html


class TestSteps:
    def test_nested_content(self):
        text = (
            "<Steps>\n"
            "1. First step with details:\n"
            "   - Sub-point A\n"
            "   - Sub-point B\n"
            "\n"
            "2. Second step with code:\n"
            "   ```bash\n"
            "   npm run dev\n"
            "   ```\n"
            "\n"
            "3. Final step\n"
            "</Steps>"
        )
        html = convert(text)
        assert 'data-component="Steps"' in html
        assert "<ol>" in html
        assert "<ul>" in html
        assert '<code class="language-bash">npm run dev\n</code>' in html


class TestNesting:
    def test_nested_tabs(self):
        text = (
            "<Tabs>\n"
            '  <TabItem label="Frontend">\n'
            "    <Tabs>\n"
            '      <TabItem label="React">React framework</TabItem>\n'
            '      <TabItem label="Vue">Vue framework</TabItem>\n'
            "    </Tabs>\n"
            "  </TabItem>\n"
            '  <TabItem label="Backend">\n'
            "    Backend content\n"
            "  </TabItem>\n"
            "</Tabs>"
        )
        html = convert(text)
        assert html.count('data-component="Tabs"') == 2
        assert html.count('data-component="TabItem"') == 4

    def test_four_levels_deep(self):
        text = (
            "<CardGrid>\n"
            '  <Card title="Outer">\n'
            "    <Tabs>\n"
            '      <TabItem label="Inner">\n'
            '        <Aside type="danger">\n'
            "          **Critical**: Very deep nesting with *emphasis*\n"
            "        </Aside>\n"
            "      </TabItem>\n"
            "    </Tabs>\n"
            "  </Card>\n"
            "</CardGrid>"
        )
        html = convert(text)
        for name in ("CardGrid", "Card", "Tabs", "TabItem", "Aside"):
            assert f'data-component="{name}"' in html
        assert "<strong>Critical</strong>" in html
        assert "<em>emphasis</em>" in html

    def test_file_tree_in_tab_item(self):
        text = (
            "<Tabs>\n"
            '  <TabItem label="Project Structure">\n'
            "    <FileTree>\n"
            "    - src/\n"
            "      - index.js\n"
            "    </FileTree>\n"
            "  </TabItem>\n"
            "</Tabs>"
        )
        html = convert(text)
        assert 'data-component="FileTree"' in html
        assert "index.js" in html


class TestNonProse:
    @pytest.mark.parametrize("body", ['<Badge text="New" />', '<Icon name="rocket" label="Launch" size="1.5rem" />'])
    def test_self_closing_components(self, body):
        html = convert(body)
        assert '<code class="mdxNode' in html
        assert "data-component" not in html

    def test_unknown_component(self):
        html = convert("<CustomWidget>\n  Content\n</CustomWidget>")
        assert "<pre><code" in html
        assert "&lt;CustomWidget&gt;" in html
        assert "data-component" not in html


class TestEdgeCases:
    def test_empty_aside(self):
        html = convert("<Aside></Aside>")
        assert '<code class="mdxNode' in html
        assert 'data-component="Aside"' not in html

    def test_whitespace_only_aside(self):
        assert 'data-component="Aside"' not in convert("<Aside>   </Aside>")

    def test_self_closing_aside(self):
        assert "&lt;Aside /&gt;" in convert("<Aside />")

    def test_multiple_components_on_one_line(self):
        html = convert("<Aside>Note</Aside><Card>Card text</Card>")
        assert 'data-component="Aside"' in html
        assert 'data-component="Card"' in html

    def test_prose_followed_by_non_prose(self):
        html = convert('<Aside type="tip">A tip</Aside>\n<Badge text="New" />')
        assert 'data-component="Aside"' in html
        assert "&lt;Badge" in html

    def test_entities_and_emoji(self):
        html = convert("<Aside>\nUse &lt;div&gt; for containers. 🚀\n</Aside>")
        assert "Use &lt;div&gt; for containers. 🚀" in html


class TestRealWorld:
    def test_docs_page(self):
        text = (
            "\n# Getting Started\n\n"
            '<Aside type="tip">\nThis guide assumes you have **Node.js** installed.\n</Aside>\n\n'
            "## Installation\n\n"
            "<Steps>\n1. Create a new project\n2. Install dependencies\n</Steps>\n\n"
            "## Configuration\n\n"
            "<Tabs>\n"
            '  <TabItem label="Basic">\n'
            "    Minimal configuration needed.\n"
            "  </TabItem>\n"
            '  <TabItem label="Advanced">\n'
            '    <Aside type="caution">\n'
            "    Advanced users only!\n"
            "    </Aside>\n"
            "    Full customization available.\n"
            "  </TabItem>\n"
            "</Tabs>\n"
        )
        html = convert(text)
        assert "<h1>Getting Started</h1>" in html
        assert "<h2>Installation</h2>" in html
        assert "<h2>Configuration</h2>" in html
        assert html.count('data-component="Aside"') == 2
        assert html.count('data-component="TabItem"') == 2
        assert "<p>Full customization available.</p>" in html
