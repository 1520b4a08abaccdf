"""Unit tests for SVG to React component generation."""

import pytest
from pydantic import ValidationError

from nextasset.config.exceptions import SourceDirectoryError
from nextasset.features.svg import SvgComponentOptions, svg_to_component, svg_to_components_in_folder
from nextasset.features.svg.components import (
    jsx_attribute_name,
    remove_dimensions,
    render_component,
    to_pascal_case,
)

ARROW_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <!-- arrow -->
  <path class="icon" d="M19 12H5M12 19l-7-7 7-7" fill="none" stroke="#000" stroke-width="2" stroke-linecap="round"/>
</svg>
"""


@pytest.mark.parametrize(
    "name,expected",
    [
        ("arrow-left", "ArrowLeft"),
        ("user_profile-icon", "UserProfileIcon"),
        ("icon", "Icon"),
        ("logo.v2", "Logov2"),
        ("2fa-lock", "Svg2faLock"),
        ("trailing-", "Trailing"),
    ],
)
def test_to_pascal_case(name, expected):
    assert to_pascal_case(name) == expected


@pytest.mark.parametrize(
    "attr,expected",
    [
        ("class", "className"),
        ("stroke-width", "strokeWidth"),
        ("xlink:href", "xlinkHref"),
        ("fill", "fill"),
        ("viewBox", "viewBox"),
        ("data-name", "data-name"),
        ("aria-hidden", "aria-hidden"),
    ],
)
def test_jsx_attribute_name(attr, expected):
    assert jsx_attribute_name(attr) == expected


class TestRemoveDimensions:
    def test_with_viewbox(self):
        svg = '<svg width="24" height="24" viewBox="0 0 24 24"><rect width="5" height="5"/></svg>'

        assert remove_dimensions(svg) == '<svg viewBox="0 0 24 24"><rect width="5" height="5"/></svg>'

    def test_viewbox_derived_from_numbers(self):
        svg = '<svg width="32px" height="16"><g/></svg>'

        assert remove_dimensions(svg) == '<svg viewBox="0 0 32 16"><g/></svg>'

    def test_relative_sizes_left_alone(self):
        svg = '<svg width="100%" height="50%"><g/></svg>'

        assert remove_dimensions(svg) == svg

    def test_no_dimensions(self):
        svg = '<svg viewBox="0 0 8 8"><g/></svg>'

        assert remove_dimensions(svg) == svg


def test_render_component_typescript():
    code = render_component('<svg class="i" stroke-width="2"/>', "Icon")

    assert code == (
        "import React, { SVGProps } from 'react';\n"
        "\n"
        "const Icon = (props: SVGProps<SVGSVGElement>) => (\n"
        '  <svg {...props} className="i" strokeWidth="2"/>\n'
        ");\n"
        "\n"
        "export default Icon;\n"
    )


def test_render_component_javascript():
    code = render_component("<svg/>", "Icon", typescript=False)

    assert code.startswith("import React from 'react';\n")
    assert "const Icon = (props) => (" in code


def test_invalid_prefix_rejected():
    with pytest.raises(ValidationError):
        SvgComponentOptions(prefix="my-")


@pytest.mark.asyncio
class TestSvgToComponent:
    async def test_typescript_component(self, public_dir, write_file, tmp_path):
        source = write_file(public_dir / "arrow-left.svg", ARROW_SVG)
        out_dir = tmp_path / "components" / "icons"

        result = await svg_to_component(source, SvgComponentOptions(output_dir=out_dir))

        assert result.success is True
        assert result.component_name == "ArrowLeft"
        assert result.output_path == str(out_dir / "ArrowLeft.tsx")
        code = (out_dir / "ArrowLeft.tsx").read_text()
        assert "const ArrowLeft = (props: SVGProps<SVGSVGElement>) => (" in code
        assert "<svg {...props}" in code
        assert "className=" in code
        assert "strokeWidth=" in code
        assert "strokeLinecap=" in code
        assert "stroke-width" not in code
        assert ' width="24"' not in code
        assert "viewBox=" in code
        assert "<!--" not in code
        assert code.endswith("export default ArrowLeft;\n")

    async def test_javascript_with_affixes(self, public_dir, write_file, tmp_path):
        source = write_file(public_dir / "arrow-left.svg", ARROW_SVG)
        options = SvgComponentOptions(output_dir=tmp_path, typescript=False, prefix="Icon", suffix="Svg")

        result = await svg_to_component(source, options)

        assert result.component_name == "IconArrowLeftSvg"
        assert (tmp_path / "IconArrowLeftSvg.jsx").exists()

    async def test_keep_dimensions(self, public_dir, write_file, tmp_path):
        source = write_file(public_dir / "arrow.svg", ARROW_SVG)

        await svg_to_component(source, SvgComponentOptions(output_dir=tmp_path, remove_dimensions=False))

        assert ' width="24"' in (tmp_path / "Arrow.tsx").read_text()

    async def test_malformed_svg(self, public_dir, write_file, tmp_path):
        source = write_file(public_dir / "broken.svg", "<svg><g></svg>")

        result = await svg_to_component(source, SvgComponentOptions(output_dir=tmp_path))

        assert result.success is False
        assert result.error
        assert not (tmp_path / "Broken.tsx").exists()


@pytest.mark.asyncio
class TestSvgToComponentsInFolder:
    async def test_index_file(self, public_dir, write_file, tmp_path):
        write_file(public_dir / "arrow-left.svg", ARROW_SVG)
        write_file(public_dir / "nested" / "close.svg", ARROW_SVG)
        write_file(public_dir / "readme.txt", "not an icon")
        out_dir = tmp_path / "icons"

        results = await svg_to_components_in_folder(public_dir, SvgComponentOptions(output_dir=out_dir))

        assert [r.component_name for r in results] == ["ArrowLeft", "Close"]
        assert (out_dir / "index.ts").read_text() == (
            "export { default as ArrowLeft } from './ArrowLeft';\n"
            "export { default as Close } from './Close';\n"
        )

    async def test_name_conflict_fails_later_file(self, public_dir, write_file, tmp_path):
        write_file(public_dir / "a" / "icon.svg", ARROW_SVG)
        write_file(public_dir / "b" / "icon.svg", ARROW_SVG)

        results = await svg_to_components_in_folder(public_dir, SvgComponentOptions(output_dir=tmp_path))

        assert results[0].success is True
        assert results[1].success is False
        assert "already generated" in results[1].error
        assert (tmp_path / "index.ts").read_text() == "export { default as Icon } from './Icon';\n"

    async def test_no_index(self, public_dir, write_file, tmp_path):
        write_file(public_dir / "arrow.svg", ARROW_SVG)

        await svg_to_components_in_folder(
            public_dir, SvgComponentOptions(output_dir=tmp_path, generate_index=False, typescript=False)
        )

        assert (tmp_path / "Arrow.jsx").exists()
        assert not (tmp_path / "index.js").exists()

    async def test_missing_root_raises(self, tmp_path):
        with pytest.raises(SourceDirectoryError):
            await svg_to_components_in_folder(tmp_path / "missing")
