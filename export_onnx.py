import argparse

import torch
import torchvision

ONNX_OUTPUT = "models/mobilenet_v2.onnx"


def parse_args():
    parser = argparse.ArgumentParser(description="Export MobileNetV2 to a static-shape ONNX classifier")
    parser.add_argument("--output", default=ONNX_OUTPUT)
    parser.add_argument("--opset", type=int, default=17)
    parser.add_argument(
        "--weights",
        default="DEFAULT",
        help="torchvision weights enum name, or 'none' for random init"
    )
    return parser.parse_args()


def build_model(weights):
    if weights.lower() == "none":
        model = torchvision.models.mobilenet_v2(weights=None)
    else:
        model = torchvision.models.mobilenet_v2(
            weights=getattr(torchvision.models.MobileNet_V2_Weights, weights)
        )
    model.eval()
    return model


def export(model, output, opset=17):
    # Fixed (1,3,224,224): no dynamic axes
    dummy_input = torch.randn(1, 3, 224, 224)
    torch.onnx.export(
        model,
        (dummy_input,),
        output,
        input_names=["input"],
        output_names=["output"],
        opset_version=opset,
    )


def main():
    args = parse_args()
    device = torch.device("cpu")

    model = build_model(args.weights).to(device)
    print("Model loaded.")

    print("Exporting to ONNX...")
    export(model, args.output, args.opset)
    print(f"ONNX export complete: {args.output}")


if __name__ == "__main__":
    main()
