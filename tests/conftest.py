# tests/conftest.py

import pytest


GROBID_TEI = """<?xml version="1.0" encoding="UTF-8"?>
<TEI xmlns="http://www.tei-c.org/ns/1.0" xmlns:xlink="http://www.w3.org/1999/xlink">
  <teiHeader xml:lang="en">
    <fileDesc>
      <titleStmt>
        <title level="a" type="main">Attention Is All You Need</title>
        <author>
          <persName><forename type="first">Ashish</forename><surname>Vaswani</surname></persName>
        </author>
        <author>
          <persName><forename type="first">Noam</forename><surname>Shazeer</surname></persName>
        </author>
      </titleStmt>
    </fileDesc>
    <profileDesc>
      <abstract>
        <div>
          <p>The dominant sequence transduction models are based on
             complex recurrent networks.</p>
        </div>
      </abstract>
    </profileDesc>
  </teiHeader>
  <text>
    <body>
      <div>
        <head n="1">Introduction</head>
        <p>Recurrent neural networks <ref type="bibr" target="#b0">[1]</ref> have been
           firmly established.</p>
      </div>
      <div>
        <head n="2">Background</head>
        <p>The goal of reducing sequential computation.</p>
      </div>
    </body>
    <back>
      <div type="references">
        <listBibl>
          <biblStruct xml:id="b0">
            <analytic><title level="a" type="main">Layer normalization</title></analytic>
            <monogr><title level="j">arXiv</title><imprint><date type="published" when="2016"/></imprint></monogr>
          </biblStruct>
          <biblStruct xml:id="b1">
            <analytic><title level="a" type="main">Neural machine translation</title></analytic>
            <monogr><title level="m">ICLR</title></monogr>
          </biblStruct>
        </listBibl>
      </div>
    </back>
  </text>
</TEI>
"""


@pytest.fixture
def grobid_tei_xml() -> str:
    return GROBID_TEI
