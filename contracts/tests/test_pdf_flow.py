from io import BytesIO

from django.test import SimpleTestCase
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from contracts.pdf_flow import (
    BODY_STYLE,
    PageFlowEngine,
    SectionTitle,
    SignatureBlock,
    SignatureParty,
    Spacer,
    TextBlock,
    wrap_text,
)
from contracts.pdf_theme import A4_GEOMETRY, ACCENT, INK


def _engine(**kwargs):
    g = A4_GEOMETRY
    c = canvas.Canvas(BytesIO(), pagesize=(g.page_width * mm, g.page_height * mm))
    return PageFlowEngine(c, **kwargs)


def _kinds(engine):
    return [p.kind for p in engine.journal]


class GeometryTests(SimpleTestCase):
    def test_limits(self):
        g = A4_GEOMETRY
        self.assertAlmostEqual(g.page_width, 210, places=2)
        self.assertAlmostEqual(g.page_height, 297, places=2)
        self.assertAlmostEqual(g.text_limit, 252, places=2)
        self.assertAlmostEqual(g.title_limit, 207, places=2)
        self.assertAlmostEqual(g.spacer_limit, 257, places=2)
        self.assertAlmostEqual(g.signature_limit, 237, places=2)
        self.assertAlmostEqual(g.content_width, 170, places=2)
        self.assertEqual(g.line_height(10), 5)


class WrapTextTests(SimpleTestCase):
    def test_blank_lines_kept(self):
        self.assertEqual(wrap_text('um\n\ndois', BODY_STYLE, 170), ['um', '', 'dois'])

    def test_long_text_wraps(self):
        lines = wrap_text('palavra ' * 80, BODY_STYLE, 170)
        self.assertGreater(len(lines), 1)
        self.assertEqual(' '.join(lines).split(), ['palavra'] * 80)


class PageFlowEngineTests(SimpleTestCase):
    def test_overflow_breaks_without_dropping_blocks(self):
        engine = _engine()
        texts = [f'Linha {i}' for i in range(40)]
        engine.place_all(TextBlock(t) for t in texts)
        engine.finish()

        self.assertGreaterEqual(engine.page_number, 2)
        placed = [p for p in engine.journal if p.kind == 'text']
        self.assertEqual([p.text for p in placed], texts)

        break_index = _kinds(engine).index('page_break')
        before = [p for p in engine.journal[:break_index] if p.kind == 'text']
        after = [p for p in engine.journal[break_index:] if p.kind == 'text']
        self.assertTrue(all(p.page == 1 for p in before))
        self.assertTrue(all(p.page == 2 for p in after))
        self.assertEqual(before[-1].text, texts[len(before) - 1])
        self.assertEqual(after[0].text, texts[len(before)])
        self.assertEqual(after[0].y, A4_GEOMETRY.continuation_top)

    def test_text_never_crosses_footer_area(self):
        engine = _engine()
        engine.place_all(TextBlock('texto ' * 60) for _ in range(30))
        g = A4_GEOMETRY
        for p in engine.journal:
            if p.kind == 'text':
                lines = wrap_text(p.text, BODY_STYLE, g.content_width)
                self.assertLessEqual(p.y + len(lines) * g.line_height(10), g.text_limit)

    def test_footer_drawn_before_page_break(self):
        engine = _engine()
        engine.y = A4_GEOMETRY.text_limit
        engine.place(TextBlock('Próxima página'))
        self.assertEqual(_kinds(engine), ['footer', 'page_break', 'text'])
        self.assertEqual(engine.journal[0].page, 1)
        self.assertEqual(engine.journal[1].page, 2)

    def test_title_near_bottom_moves_to_next_page(self):
        engine = _engine()
        engine.y = A4_GEOMETRY.title_limit + 1
        engine.place(SectionTitle('CLÁUSULA'))
        engine.place(TextBlock('Corpo da cláusula.'))

        self.assertEqual(_kinds(engine), ['footer', 'page_break', 'title', 'text'])
        title = engine.journal[2]
        self.assertEqual(title.page, 2)
        self.assertEqual(title.y, A4_GEOMETRY.title_continuation_top)
        self.assertEqual(engine.journal[3].page, 2)

    def test_title_with_room_stays(self):
        engine = _engine()
        engine.y = A4_GEOMETRY.title_limit
        engine.place(SectionTitle('CLÁUSULA'))
        self.assertEqual(_kinds(engine), ['title'])
        self.assertAlmostEqual(engine.y, A4_GEOMETRY.title_limit + 5 + A4_GEOMETRY.title_spacing)

    def test_spacer_past_limit_breaks(self):
        engine = _engine()
        engine.y = A4_GEOMETRY.spacer_limit - 1
        engine.place(Spacer(5))
        self.assertEqual(_kinds(engine), ['spacer', 'footer', 'page_break'])
        self.assertEqual(engine.y, A4_GEOMETRY.continuation_top)

    def test_signature_block_near_bottom_breaks(self):
        engine = _engine()
        engine.y = A4_GEOMETRY.signature_limit + 1
        engine.place(SignatureBlock(
            left=SignatureParty('Contratada', 'Zafira'),
            right=SignatureParty('Cliente', 'Empresa'),
        ))
        self.assertEqual(_kinds(engine), ['footer', 'page_break', 'signature'])
        self.assertEqual(engine.journal[-1].y, A4_GEOMETRY.signature_continuation_top)
        self.assertAlmostEqual(engine.y, A4_GEOMETRY.signature_continuation_top + 25)

    def test_style_restored_after_footer(self):
        engine = _engine()
        accent_block = TextBlock('destaque', BODY_STYLE.derive(color=ACCENT))
        engine.place(accent_block)
        engine.draw_footer()
        self.assertIs(engine.current_style.color, ACCENT)

        engine.break_page(A4_GEOMETRY.continuation_top)
        self.assertIs(engine.current_style.color, INK)

    def test_repeated_header_hook(self):
        calls = []
        engine = _engine(repeated_header=lambda e: calls.append(e.page_number))
        engine.break_page(A4_GEOMETRY.continuation_top)
        engine.break_page(A4_GEOMETRY.continuation_top)
        self.assertEqual(calls, [2, 3])

    def test_header_falls_back_to_text(self):
        engine = _engine()
        engine.draw_first_page_header()
        self.assertEqual(engine.journal[0].text, 'zafira')

    def test_finish_draws_single_footer(self):
        engine = _engine()
        engine.finish()
        engine.finish()
        self.assertEqual(_kinds(engine), ['footer'])

    def test_unknown_block(self):
        with self.assertRaises(TypeError):
            _engine().place('texto solto')
