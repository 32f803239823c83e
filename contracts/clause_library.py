"""Fixed wording of the Zafira service contract.

These texts are part of a legal instrument: numbering and wording are
reproduced exactly, and only the fields interpolated by the composer vary.
"""

DOCUMENT_TITLE = 'CONTRATO DE PRESTAÇÃO DE SERVIÇOS – ZAFIRA COMUNICAÇÃO'

SECTION_PARTIES = 'IDENTIFICAÇÃO DAS PARTES'
SECTION_OBJECT = 'DO OBJETO DO CONTRATO'
SECTION_CLIENT_OBLIGATIONS = 'OBRIGAÇÕES DO CONTRATANTE'
SECTION_PROVIDER_OBLIGATIONS = 'OBRIGAÇÕES DA CONTRATADA'
SECTION_PAYMENT = 'DO PREÇO E DAS CONDIÇÕES DE PAGAMENTO'
SECTION_GENERAL = 'DAS CONDIÇÕES EM GERAIS'
SECTION_VENUE = 'DO FORO'

CONTRACTED_PARTY = (
    'CONTRATADA: ZAFIRA COMUNICAÇÃO E MARKETING, CNPJ: 28.077.026/0001-57. '
    'Responsável legal pela empresa: Gabriéli Dias da Silva, brasileira, solteira, jornalista, '
    'carteira de identidade nº 1.916.790, CPF nº 065.724.891-76, residente e domiciliado na '
    'Rua Ourinhos, 74  Bairro Vila Carvalho, Cep 79005270, Cidade e Estado Campo Grande/MS.'
)

RECITAL = (
    'As partes acima identificadas têm, entre si, justo e acertado o presente Contrato de '
    'Prestação de Serviços, que se regerá pelas cláusulas seguintes e pelas condições de preço, '
    'forma e termo de pagamento descritas no presente.'
)

OBJECT_CLAUSE = (
    'Cláusula 1ª. É objeto do presente contrato a prestação do serviço de gerenciamento de redes sociais:'
)

CLIENT_OBLIGATIONS = (
    'Cláusula 2ª. O CONTRATANTE deverá fornecer a CONTRATADA todas as informações necessárias à '
    'realização do serviço, devendo especificar os detalhes necessários à perfeita consecução do '
    'mesmo, e a forma de como ele deve ser entregue.',
    'Cláusula 3ª. O CONTRATANTE deverá efetuar o pagamento na forma e condições estabelecidas na '
    'cláusula 12ª.',
    'Cláusula 4ª. O CONTRATANTE deverá comunicar a CONTRATADA se precisar finalizar o serviço antes '
    'do prazo estabelecido no contrato com trinta dias de antecedência.',
    'Cláusula 5ª. Se responsabilizar única e exclusivamente, sem qualquer vinculação com a '
    'CONTRATADA, em relação às postagens que eventualmente produzir e publicar em suas redes '
    'sociais, uma vez que não fazem parte do objeto contratado com a CONTRATADA.',
    'Cláusula 6ª. Promover através de seu representante, o acompanhamento e fiscalizar, sustar, '
    'recusar, mandar desfazer ou refazer qualquer serviço que não esteja de acordo com a técnica '
    'atual, normas ou especificações que atendem ao objeto contratado, ficando certo que, em '
    'nenhuma hipótese, a falta de fiscalização do CONTRATANTE eximirá a CONTRATADA de suas '
    'responsabilidades provenientes do contrato.',
)

PROVIDER_OBLIGATIONS = (
    'Cláusula 7ª. É dever da CONTRATADA oferecer ao contratante a cópia do presente instrumento, '
    'contendo todas as especificidades da prestação de serviço contratada.',
    'Cláusula 8ª. Guardar sigilo de todas as informações que forem postas à sua disposição para a '
    'execução dos trabalhos, não podendo utilizar e/ou resguardar quaisquer informações recebidas, '
    'sob pena de responsabilizar-se por perdas e danos.',
    'Cláusula 9ª. Garantir a execução deste contrato por sua equipe de profissionais, sendo '
    'permitida a subcontratação por parte da CONTRATADA, sob sua exclusiva responsabilidade.',
    'Cláusula 10ª. A CONTRATADA deverá fornecer Nota Fiscal de Serviços, referente ao (s) '
    'pagamento (s) efetuado (s) pelo CONTRATANTE.',
    'Cláusula 11ª. Enviar para a CONTRATANTE todos os materiais produzidos do objetivo deste '
    'contrato finalizados.',
)

LATE_PAYMENT_CLAUSE = (
    'Cláusula 13ª. Em caso de inadimplemento das prestações avançadas acima incidirá sobre o valor '
    'devido, multa pecuniária de 2% e juros de mora de 5% ao mês mais correção monetária.'
)

COLLECTION_PARAGRAPH = (
    'Parágrafo único. Em caso de cobrança judicial, devem ser acrescidas custas processuais e 30% '
    'de honorários advocatícios.'
)

GENERAL_CONDITIONS = (
    'Cláusula 14ª. No caso de não haver o cumprimento de qualquer uma das cláusulas do presente '
    'instrumento, a parte que não cumpriu deverá pagar uma multa de 30% do valor total do contrato '
    'para a outra parte.',
    'Cláusula 15ª. Salvo com a expressa autorização do CONTRATANTE, não pode a CONTRATADA transferir '
    'ou subcontratar os serviços previstos neste instrumento, sob o risco de ocorrer a rescisão '
    'imediata.',
    'Cláusula 16ª. Todos os serviços extraordinários, ou seja, aqueles não previstos no objeto deste '
    'contrato e que forem necessários ou solicitados pela CONTRATANTE, serão cobrados à parte, com '
    'preços previamente convencionados.',
    'Cláusulas 17ª. Todos os documentos produzidos pela CONTRATADA passarão a ser de propriedade da '
    'CONTRATANTE, podendo ser utilizados, a qualquer tempo, para qualquer finalidade, sem '
    'necessidade de autorização prévia ou posterior da CONTRATADA.',
)

VENUE_CLAUSE = (
    'Cláusula 18ª. Para dirimir quaisquer controvérsias oriundas do presente contrato, as partes '
    'elegem o foro da comarca de Campo Grande/MS.'
)

CONTRACTOR_SIGNATORY = 'Gabriéli Dias da Silva'
CONTRACTOR_COMPANY = 'ZAFIRA COMUNICAÇÃO'
CLIENT_SIGNATORY_FALLBACK = 'CONTRATANTE'
CLIENT_COMPANY_FALLBACK = 'EMPRESA'
