import base64
from io import BytesIO

from PIL import Image

QTD_SERVICE = 'Criação de [QTD] postagens semanais, com inclusão de textos e legendas nas artes'
REELS_SERVICE = 'Produção de roteiro para reels'


def png_bytes(image):
    out = BytesIO()
    image.save(out, format='PNG')
    return out.getvalue()


def signature_image(visible=True, size=(120, 40)):
    """Transparent canvas with a blue stroke (or nothing at all)."""
    img = Image.new('RGBA', size, (0, 0, 0, 0))
    if visible:
        for x in range(10, size[0] - 10):
            img.putpixel((x, size[1] // 2), (30, 60, 200, 255))
    return img


def signature_data_url(visible=True):
    return 'data:image/png;base64,' + base64.b64encode(png_bytes(signature_image(visible))).decode('ascii')


def contract_payload(**overrides):
    payload = {
        'razaoSocial': 'Loja Exemplo Ltda',
        'cnpj': '12.345.678/0001-90',
        'enderecoEmpresa': 'Rua das Flores, 100',
        'cepEmpresa': '79000-000',
        'cidadeEmpresa': 'Campo Grande',
        'responsavelNome': 'Maria Souza',
        'responsavelEstadoCivil': 'casada',
        'responsavelProfissao': 'empresária',
        'responsavelRg': '1234567',
        'responsavelCpf': '123.456.789-00',
        'responsavelEndereco': 'Rua A, 1',
        'responsavelCidade': 'Campo Grande',
        'responsavelEstado': 'MS',
        'email': 'maria@example.com',
        'dataInicio': '01/02/2026',
        'dataFim': '01/06/2026',
        'contractDuration': '4',
        'quantidadeMesesPagamento': '4',
        'valorTotal': '4.000,00',
        'valorTotalExtenso': 'quatro mil reais',
        'valorMensal': '1.000,00',
        'valorMensalExtenso': 'mil reais',
        'diaPagamento': '10',
        'selectedServices': [QTD_SERVICE, REELS_SERVICE],
        'serviceQuantities': {QTD_SERVICE: '4'},
    }
    payload.update(overrides)
    return payload
